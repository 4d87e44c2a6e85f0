from rest_framework import serializers, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.response import Response

from songs.models import Song

from . import gateway
from .exceptions import ElementNotFound, InvalidDate, ServiceError, ServiceNotFound
from .liturgies import SETTINGS, default_service_type, get_template
from .models import CustomService, ServiceDetails
from .parser import parse_custom_order, parse_order
from .utils import describe_date, service_date_key


class ServiceDateField(serializers.CharField):
    """A service date key, normalized to ``M/D/YY``."""

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        try:
            return service_date_key(value)
        except InvalidDate as err:
            raise serializers.ValidationError(str(err))


class ServiceDetailsSerializer(serializers.ModelSerializer):
    lastUpdated = serializers.DateTimeField(source="last_updated", read_only=True)

    class Meta:
        model = ServiceDetails
        fields = ["date", "type", "setting", "content", "elements", "lastUpdated"]


class SaveOrderSerializer(serializers.Serializer):
    date = ServiceDateField()
    type = serializers.CharField(max_length=100)
    content = serializers.CharField(trim_whitespace=False)
    setting = serializers.ChoiceField(choices=SETTINGS, required=False)


class SelectionSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=["hymn", "contemporary"], default="hymn")
    title = serializers.CharField()
    number = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    hymnal = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    author = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    sheetMusic = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    youtube = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class SelectSongSerializer(serializers.Serializer):
    date = ServiceDateField()
    elementId = serializers.CharField()
    selection = SelectionSerializer(required=False, allow_null=True)
    songId = serializers.PrimaryKeyRelatedField(queryset=Song.objects.all(), required=False)

    def validate(self, attrs):
        song = attrs.pop("songId", None)
        if song is not None:
            attrs["selection"] = song.as_selection()
        elif "selection" not in attrs:
            raise serializers.ValidationError("Either a selection or a songId is required")
        return attrs


class SetReferenceSerializer(serializers.Serializer):
    date = ServiceDateField()
    elementId = serializers.CharField()
    reference = serializers.CharField(allow_blank=True)


class DateSerializer(serializers.Serializer):
    date = ServiceDateField()


class ParseOrderSerializer(serializers.Serializer):
    date = ServiceDateField(required=False)
    content = serializers.CharField(trim_whitespace=False)


class ServiceDetailsViewSet(viewsets.GenericViewSet):
    queryset = ServiceDetails.objects.all()
    serializer_class = ServiceDetailsSerializer

    def handle_exception(self, exc):
        if isinstance(exc, (ServiceNotFound, ElementNotFound)):
            exc = NotFound(str(exc))
        elif isinstance(exc, ServiceError):
            exc = ValidationError({"error": str(exc)})
        return super().handle_exception(exc)

    def list(self, request):
        # Handle /api/service-details/?date=3/2/25
        date = request.query_params.get("date")
        if date is None:
            return Response(self.get_serializer(self.get_queryset(), many=True).data)
        service = gateway.get_service(date)
        if service is None:
            raise ServiceNotFound(service_date_key(date))
        return Response(self.get_serializer(service).data)

    def create(self, request):
        serializer = SaveOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = gateway.save_order(**serializer.validated_data)
        data = self.get_serializer(result.service).data
        if result.orphan_warning:
            data["orphanWarning"] = result.orphan_warning
        return Response(data)

    @action(detail=False, methods=["post"])
    def clear(self, request):
        serializer = DateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = gateway.clear_service(serializer.validated_data["date"])
        return Response(self.get_serializer(service).data)

    @action(detail=False, methods=["post"], url_path="select-song")
    def select_song(self, request):
        serializer = SelectSongSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        service = gateway.select_song(data["date"], data["elementId"], data["selection"])
        return Response(self.get_serializer(service).data)

    @action(detail=False, methods=["post"], url_path="set-reference")
    def set_reference(self, request):
        serializer = SetReferenceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        service = gateway.set_reference(data["date"], data["elementId"], data["reference"])
        return Response(self.get_serializer(service).data)

    @action(detail=False, methods=["get"])
    def orphans(self, request):
        serializer = DateSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        date = serializer.validated_data["date"]
        record = gateway.latest_orphans(date)
        if record is None:
            raise NotFound(f"No orphaned songs found for {date}")
        return Response({
            "orphanedSongs": record.songs,
            "orphanedAt": record.timestamp,
            "count": len(record.songs),
        })

    @action(detail=False, methods=["get"], url_path="template")
    def service_template(self, request):
        serializer = DateSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        date = serializer.validated_data["date"]
        service_type = request.query_params.get("type") or default_service_type(date)
        setting = request.query_params.get("setting", "1")

        content = get_template(service_type, date, setting)
        if content is None:
            custom_service = CustomService.objects.filter(id=service_type).first()
            if custom_service is None:
                raise NotFound(f"No template for service type {service_type!r}")
            content = custom_service.template
        return Response({"date": date, "type": service_type, "setting": setting, "content": content, **describe_date(date)})

    @action(detail=False, methods=["post"], url_path="parse")
    def preview_order(self, request):
        serializer = ParseOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        date = serializer.validated_data.get("date", "")
        existing = []
        if date:
            service = gateway.get_service(date)
            existing = service.elements if service is not None else []
        elements = parse_order(serializer.validated_data["content"], existing, date=date)
        return Response([element.to_dict() for element in elements])


class CustomServiceSerializer(serializers.ModelSerializer):
    id = serializers.SlugField(required=False, allow_blank=True)
    order = serializers.CharField(write_only=True, required=False, trim_whitespace=False)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = CustomService
        fields = ["id", "name", "elements", "order", "template", "createdAt", "updatedAt"]
        read_only_fields = ["template"]

    def validate_id(self, value):
        if self.instance is not None:
            if value and value != self.instance.id:
                raise serializers.ValidationError("The id of a custom service cannot be changed")
            return self.instance.id
        if value and CustomService.objects.filter(id=value).exists():
            raise serializers.ValidationError("A custom service with this id already exists")
        return value

    def validate_elements(self, value):
        if not isinstance(value, list) or not all(isinstance(element, dict) for element in value):
            raise serializers.ValidationError("Expected a list of elements")
        ret = []
        for element in value:
            element = dict(element)
            element.pop("suggestion", None)
            ret.append(element)
        return ret

    def validate(self, attrs):
        order = attrs.pop("order", None)
        if "elements" not in attrs and order is not None:
            attrs["elements"] = self.validate_elements(
                [element.to_dict() for element in parse_custom_order(order)]
            )
        if self.instance is None and not attrs.get("elements"):
            raise serializers.ValidationError("A custom service needs elements or an order")
        return attrs


class CustomServiceViewSet(viewsets.ModelViewSet):
    queryset = CustomService.objects.all().order_by("name")
    serializer_class = CustomServiceSerializer

    @action(detail=False, methods=["post"])
    def preview(self, request):
        order = request.data.get("order")
        if not isinstance(order, str) or not order.strip():
            raise ValidationError({"order": "This field is required."})
        return Response([element.to_dict() for element in parse_custom_order(order)])


def register(router):
    router.register("service-details", ServiceDetailsViewSet)
    router.register("custom-services", CustomServiceViewSet)
