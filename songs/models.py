from django.db import models

from services.elements import SongSelection


class Song(models.Model):
    """A hymn or contemporary song in the library."""
    SONG_TYPES = [("hymn", "Hymn"), ("contemporary", "Contemporary")]
    title = models.CharField(max_length=255)
    song_type = models.CharField(max_length=20, choices=SONG_TYPES, default="hymn")
    number = models.CharField(max_length=20, blank=True)
    hymnal = models.CharField(max_length=50, blank=True, help_text="e.g. cranberry")
    author = models.CharField(max_length=255, blank=True)
    sheet_music = models.URLField(blank=True)
    youtube = models.URLField(blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["title"]

    def __str__(self):
        if self.song_type == "hymn" and self.number:
            return f"{self.title} #{self.number}"
        return self.title

    def as_selection(self) -> SongSelection:
        """Return the selection stored on a song element when this song is chosen."""
        return SongSelection(
            title=self.title,
            type=self.song_type,
            number=self.number or None,
            hymnal=self.hymnal or None,
            author=self.author or None,
            sheet_music=self.sheet_music or None,
            youtube=self.youtube or None,
            notes=self.notes or None,
        )
