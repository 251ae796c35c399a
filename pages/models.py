# pages/models.py
from django.db import models, transaction
from django.db.models import Max
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from .handlers import get_handler
from .slugs import unique_slug


def _is_blank(value) -> bool:
    return value is None or value == "" or value == [] or value == {}


class PageTemplate(models.Model):
    """
    A selectable page layout. `handler` is the registry key of the
    TemplateHandler that validates and stores the template's own fields.
    """

    name = models.CharField(max_length=255)
    component_name = models.CharField(
        max_length=255,
        help_text="Frontend component that renders this template, e.g. 'LandingPage'.",
    )
    handler = models.CharField(
        max_length=100,
        default="default",
        help_text="Template handler key, e.g. 'default', 'landing', 'container'.",
    )
    is_selectable = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Page Template"
        verbose_name_plural = "Page Templates"

    def __str__(self) -> str:
        return self.name

    def get_handler(self):
        return get_handler(self.handler)


class PageQuerySet(models.QuerySet):
    def published(self):
        return self.filter(published_at__isnull=False)

    def drafts(self):
        return self.filter(published_at__isnull=True)

    def filter_by_params(self, params):
        """
        ?parent=root -> top level pages, ?parent=<id> -> children of <id>.
        """
        parent = params.get("parent")
        if parent in (None, ""):
            return self
        if parent == "root":
            return self.filter(parent__isnull=True)
        try:
            parent_id = int(parent)
        except (TypeError, ValueError):
            raise ValidationError({"parent": "Must be 'root' or a page id."})
        return self.filter(parent_id=parent_id)


PageManager = models.Manager.from_queryset(PageQuerySet)


class PublishedPageManager(PageManager):
    def get_queryset(self):
        return super().get_queryset().published()


class Page(models.Model):
    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, blank=True)
    uri = models.CharField(
        max_length=1024,
        blank=True,
        db_index=True,
        help_text="Full path built from the ancestors' slugs, e.g. 'about/team'.",
    )

    parent = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="children",
    )
    template = models.ForeignKey(
        PageTemplate,
        on_delete=models.PROTECT,
        related_name="pages",
    )

    order = models.PositiveIntegerField(default=0, db_index=True)

    is_stand_alone = models.BooleanField(default=False)
    has_fixed_template = models.BooleanField(default=False)
    has_fixed_uri = models.BooleanField(default=False)
    is_deletable = models.BooleanField(default=True)

    # null = draft
    published_at = models.DateTimeField(null=True, blank=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    all_objects = PageManager()
    objects = PublishedPageManager()

    class Meta:
        default_manager_name = "all_objects"
        ordering = ["order", "id"]
        indexes = [
            models.Index(fields=["parent", "slug"], name="pages_page_parent_slug_idx"),
        ]
        verbose_name = "Page"
        verbose_name_plural = "Pages"

    def __str__(self) -> str:
        return self.uri or self.title

    def save(self, *args, **kwargs):
        update_fields = kwargs.get("update_fields")
        regenerate = self._state.adding or not self.has_fixed_uri
        if regenerate and (update_fields is None or "slug" in update_fields):
            self.slug = unique_slug(self, self.slug or self.title)
        super().save(*args, **kwargs)

    # ------------------------------------------------------------------
    # Slug / URI
    # ------------------------------------------------------------------

    def slug_exists(self, slug: str) -> bool:
        return (
            Page.all_objects.filter(slug=slug, parent_id=self.parent_id)
            .exclude(pk=self.pk or 0)
            .exists()
        )

    def generate_uri(self) -> str:
        parent = self.parent
        if parent is not None and parent.uri:
            return f"{parent.uri}/{self.slug}"
        return self.slug

    @classmethod
    def next_order(cls) -> int:
        current = cls.all_objects.aggregate(current=Max("order"))["current"]
        return (current or 0) + 1

    # ------------------------------------------------------------------
    # Draft / publish
    # ------------------------------------------------------------------

    @property
    def is_published(self) -> bool:
        return self.published_at is not None

    @property
    def is_draft(self) -> bool:
        return self.published_at is None

    def publish(self):
        self.published_at = timezone.now()
        self.save(update_fields=["published_at", "updated_at"])

    def draft(self):
        self.published_at = None
        self.save(update_fields=["published_at", "updated_at"])

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def set_meta(self, key: str, value):
        meta, _ = self.meta_entries.get_or_create(key=key, defaults={"value": value})
        return meta

    def sync_meta(self, values: dict):
        with transaction.atomic():
            for key, value in values.items():
                self.meta_entries.update_or_create(key=key, defaults={"value": value})

    def get_meta(self, key: str, default=None):
        for meta in self.meta_entries.all():
            if meta.key == key:
                return meta.value
        return default

    # ------------------------------------------------------------------
    # Contents
    # ------------------------------------------------------------------

    def add_contents(self, contents: dict):
        PageContent.objects.bulk_create(
            [PageContent(page=self, key=key, value=value) for key, value in contents.items()]
        )

    def delete_contents(self):
        self.contents.all().delete()

    def has_content(self, key: str) -> bool:
        return any(c.key == key and not _is_blank(c.value) for c in self.contents.all())

    def get_content(self, key: str):
        for content in self.contents.all():
            if content.key == key and not _is_blank(content.value):
                return content.value
        return None

    # ------------------------------------------------------------------
    # Media
    # ------------------------------------------------------------------

    def attach_media(self, media_id: int, group: str = "default"):
        return self.media.create(media_id=media_id, group=group)

    def detach_media(self, group: str | None = None):
        qs = self.media.all()
        if group is not None:
            qs = qs.filter(group=group)
        qs.delete()


class PageContent(models.Model):
    page = models.ForeignKey(
        Page,
        on_delete=models.CASCADE,
        related_name="contents",
    )
    key = models.CharField(max_length=255)
    value = models.JSONField(null=True, blank=True)

    class Meta:
        unique_together = ("page", "key")
        ordering = ["id"]
        verbose_name = "Page Content"
        verbose_name_plural = "Page Contents"

    def __str__(self) -> str:
        return f"{self.page_id}:{self.key}"


class PageMeta(models.Model):
    page = models.ForeignKey(
        Page,
        on_delete=models.CASCADE,
        related_name="meta_entries",
    )
    key = models.CharField(max_length=255)
    value = models.TextField(null=True, blank=True)

    class Meta:
        unique_together = ("page", "key")
        ordering = ["id"]
        verbose_name = "Page Metadata"
        verbose_name_plural = "Page Metadata"

    def __str__(self) -> str:
        return f"{self.page_id}:{self.key}"


class PageMedia(models.Model):
    """Reference to a media item stored elsewhere, grouped per page slot."""

    DEFAULT_GROUP = "default"

    page = models.ForeignKey(
        Page,
        on_delete=models.CASCADE,
        related_name="media",
    )
    media_id = models.PositiveIntegerField()
    group = models.CharField(max_length=100, default=DEFAULT_GROUP)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        verbose_name = "Page Media"
        verbose_name_plural = "Page Media"

    def __str__(self) -> str:
        return f"{self.page_id}:{self.group}:{self.media_id}"
