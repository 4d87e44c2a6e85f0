from django.db.models import Q
from rest_framework import serializers, viewsets

from .models import Song


class SongSerializer(serializers.ModelSerializer):
    sheetMusic = serializers.URLField(source="sheet_music", required=False, allow_blank=True)
    type = serializers.ChoiceField(source="song_type", choices=Song.SONG_TYPES, required=False)

    class Meta:
        model = Song
        fields = ["id", "title", "type", "number", "hymnal", "author", "sheetMusic", "youtube", "notes"]


class SongViewSet(viewsets.ModelViewSet):
    queryset = Song.objects.all()
    serializer_class = SongSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        # Handle /api/songs/?type=hymn
        song_type = self.request.query_params.get("type")
        if song_type is not None:
            queryset = queryset.filter(song_type=song_type)
        # Support the 'q' parameter for global search
        query_param = self.request.query_params.get("q")
        if query_param:
            queryset = queryset.filter(
                Q(title__icontains=query_param) |
                Q(author__icontains=query_param) |
                Q(number=query_param)
            )
        return queryset


def register(router):
    router.register("songs", SongViewSet)
