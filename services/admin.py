from django.contrib import admin, messages
from django.http import JsonResponse
from django.urls import path

from . import gateway
from .exceptions import ServiceError
from .models import CustomService, OrphanedSongs, ServiceDetails
from .parser import parse_order
from .utils import service_date_key


class ParseOrderMixin:
    def get_urls(self):
        return [
            path("parse_order", self.admin_site.admin_view(self._parse_order), name="services_parse_order"),
        ] + super().get_urls()

    def _parse_order(self, request):
        """Return the elements of an order of worship as JSON."""
        content = request.POST.get("content", "")
        date = request.POST.get("date", "")
        if not content.strip():
            return JsonResponse({"invalid": True, "errors": "The order of worship is empty"}, status=400)
        try:
            date = service_date_key(date) if date else ""
            service = gateway.get_service(date) if date else None
        except ServiceError as err:
            return JsonResponse({"invalid": True, "errors": f"{type(err).__name__}: {err}"}, status=400)
        existing = service.elements if service is not None else []
        elements = parse_order(content, existing, date=date)
        return JsonResponse({"elements": [element.to_dict() for element in elements]})


@admin.register(ServiceDetails)
class ServiceDetailsAdmin(ParseOrderMixin, admin.ModelAdmin):
    list_display = ('date', 'type', 'setting', 'last_updated')
    list_filter = ('type', 'setting')
    search_fields = ('date', 'content')
    readonly_fields = ('last_updated',)
    actions = ['clear_services']

    @admin.action(description="Clear the selected services")
    def clear_services(self, request, queryset):
        for service in queryset:
            gateway.clear_service(service.date)
        self.message_user(request, f"{queryset.count()} service(s) cleared.", messages.SUCCESS)


@admin.register(CustomService)
class CustomServiceAdmin(admin.ModelAdmin):
    list_display = ('name', 'id', 'updated_at')
    search_fields = ('name',)
    readonly_fields = ('template',)


@admin.register(OrphanedSongs)
class OrphanedSongsAdmin(admin.ModelAdmin):
    list_display = ('date', 'timestamp', 'orphaned_by', 'original_element_count', 'new_element_count')
    list_filter = ('orphaned_by',)
    search_fields = ('date',)
