from django.contrib import admin

from .models import Song

# Register your models here.

@admin.register(Song)
class SongAdmin(admin.ModelAdmin):
    list_display = ('title', 'song_type', 'number', 'hymnal', 'author', 'created_at')
    list_filter = ('song_type', 'hymnal')
    search_fields = ('title', 'author', 'number')

    fieldsets = (
        (None, {
            'fields': ('title', 'song_type', 'number', 'hymnal', 'author'),
        }),
        ('Resources', {
            'fields': ('sheet_music', 'youtube', 'notes'),
        }),
    )
