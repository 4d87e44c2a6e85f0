from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CustomService",
            fields=[
                ("id", models.SlugField(blank=True, max_length=100, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=200)),
                ("elements", models.JSONField(blank=True, default=list)),
                ("template", models.TextField(blank=True, editable=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name="OrphanedSongs",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.CharField(db_index=True, max_length=8)),
                ("timestamp", models.DateTimeField(auto_now_add=True)),
                ("orphaned_by", models.CharField(default="pastor_edit", max_length=50)),
                ("songs", models.JSONField(default=list)),
                ("original_element_count", models.PositiveIntegerField(default=0)),
                ("new_element_count", models.PositiveIntegerField(default=0)),
            ],
            options={
                "verbose_name_plural": "orphaned songs",
                "ordering": ["-timestamp", "-pk"],
            },
        ),
        migrations.CreateModel(
            name="ServiceDetails",
            fields=[
                ("date", models.CharField(help_text="M/D/YY", max_length=8, primary_key=True, serialize=False)),
                ("type", models.CharField(blank=True, max_length=100)),
                ("setting", models.CharField(default="1", max_length=10)),
                ("content", models.TextField(blank=True)),
                ("elements", models.JSONField(blank=True, default=list)),
                ("last_updated", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name_plural": "service details",
            },
        ),
    ]
