import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="PageTemplate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                (
                    "component_name",
                    models.CharField(
                        help_text="Frontend component that renders this template, e.g. 'LandingPage'.",
                        max_length=255,
                    ),
                ),
                (
                    "handler",
                    models.CharField(
                        default="default",
                        help_text="Template handler key, e.g. 'default', 'landing', 'container'.",
                        max_length=100,
                    ),
                ),
                ("is_selectable", models.BooleanField(default=True)),
            ],
            options={
                "verbose_name": "Page Template",
                "verbose_name_plural": "Page Templates",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Page",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("slug", models.SlugField(blank=True, max_length=255)),
                (
                    "uri",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Full path built from the ancestors' slugs, e.g. 'about/team'.",
                        max_length=1024,
                    ),
                ),
                ("order", models.PositiveIntegerField(db_index=True, default=0)),
                ("is_stand_alone", models.BooleanField(default=False)),
                ("has_fixed_template", models.BooleanField(default=False)),
                ("has_fixed_uri", models.BooleanField(default=False)),
                ("is_deletable", models.BooleanField(default=True)),
                ("published_at", models.DateTimeField(blank=True, db_index=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="children",
                        to="pages.page",
                    ),
                ),
                (
                    "template",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="pages",
                        to="pages.pagetemplate",
                    ),
                ),
            ],
            options={
                "verbose_name": "Page",
                "verbose_name_plural": "Pages",
                "ordering": ["order", "id"],
                "default_manager_name": "all_objects",
                "indexes": [models.Index(fields=["parent", "slug"], name="pages_page_parent_slug_idx")],
            },
        ),
        migrations.CreateModel(
            name="PageContent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(max_length=255)),
                ("value", models.JSONField(blank=True, null=True)),
                (
                    "page",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="contents",
                        to="pages.page",
                    ),
                ),
            ],
            options={
                "verbose_name": "Page Content",
                "verbose_name_plural": "Page Contents",
                "ordering": ["id"],
                "unique_together": {("page", "key")},
            },
        ),
        migrations.CreateModel(
            name="PageMeta",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(max_length=255)),
                ("value", models.TextField(blank=True, null=True)),
                (
                    "page",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="meta_entries",
                        to="pages.page",
                    ),
                ),
            ],
            options={
                "verbose_name": "Page Metadata",
                "verbose_name_plural": "Page Metadata",
                "ordering": ["id"],
                "unique_together": {("page", "key")},
            },
        ),
        migrations.CreateModel(
            name="PageMedia",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("media_id", models.PositiveIntegerField()),
                ("group", models.CharField(default="default", max_length=100)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "page",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="media",
                        to="pages.page",
                    ),
                ),
            ],
            options={
                "verbose_name": "Page Media",
                "verbose_name_plural": "Page Media",
                "ordering": ["id"],
            },
        ),
    ]
