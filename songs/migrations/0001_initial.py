from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Song",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                (
                    "song_type",
                    models.CharField(
                        choices=[("hymn", "Hymn"), ("contemporary", "Contemporary")], default="hymn", max_length=20
                    ),
                ),
                ("number", models.CharField(blank=True, max_length=20)),
                ("hymnal", models.CharField(blank=True, help_text="e.g. cranberry", max_length=50)),
                ("author", models.CharField(blank=True, max_length=255)),
                ("sheet_music", models.URLField(blank=True)),
                ("youtube", models.URLField(blank=True)),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["title"],
            },
        ),
    ]
