from django.db import models
from django.utils.text import slugify

from .elements import as_element


class ServiceDetails(models.Model):
    """The order of worship of one service date."""

    date = models.CharField(max_length=8, primary_key=True, help_text="M/D/YY")
    type = models.CharField(max_length=100, blank=True)
    setting = models.CharField(max_length=10, default="1")
    content = models.TextField(blank=True)
    elements = models.JSONField(default=list, blank=True)
    last_updated = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "service details"

    def __str__(self):
        return f"{self.type or 'Empty service'} on {self.date}"

    def get_elements(self):
        return [as_element(element) for element in self.elements or []]

    @property
    def is_empty(self):
        return not self.content and not self.elements


class CustomService(models.Model):
    """A reusable order of worship for special services (Good Friday, Christmas Eve...)."""

    id = models.SlugField(max_length=100, primary_key=True, blank=True)
    name = models.CharField(max_length=200)
    elements = models.JSONField(default=list, blank=True)
    template = models.TextField(blank=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.id:
            base = slugify(self.name).replace("-", "_") or "service"
            candidate, n = base, 2
            while type(self).objects.filter(id=candidate).exists():
                candidate = f"{base}_{n}"
                n += 1
            self.id = candidate
        self.template = "\n".join(element.content or "" for element in map(as_element, self.elements or []))
        super().save(*args, **kwargs)


class OrphanedSongs(models.Model):
    """Song selections dropped by an edit of the order of worship, kept for recovery."""

    date = models.CharField(max_length=8, db_index=True)
    timestamp = models.DateTimeField(auto_now_add=True)
    orphaned_by = models.CharField(max_length=50, default="pastor_edit")
    songs = models.JSONField(default=list)
    original_element_count = models.PositiveIntegerField(default=0)
    new_element_count = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["-timestamp", "-pk"]
        verbose_name_plural = "orphaned songs"

    def __str__(self):
        return f"{len(self.songs)} orphaned song(s) on {self.date}"
