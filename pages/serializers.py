# pages/serializers.py
from rest_framework import serializers

from .exceptions import UnknownTemplateHandler
from .models import Page, PageMedia, PageTemplate


class PageTemplateSerializer(serializers.ModelSerializer):
    class Meta:
        model = PageTemplate
        fields = ["id", "name", "component_name", "is_selectable"]


class PageMediaSerializer(serializers.ModelSerializer):
    class Meta:
        model = PageMedia
        fields = ["media_id", "group"]


class PageSerializer(serializers.ModelSerializer):
    parent_id = serializers.IntegerField(read_only=True, allow_null=True)
    template = PageTemplateSerializer(read_only=True)
    is_published = serializers.BooleanField(read_only=True)
    # only present when the queryset is annotated (list endpoint)
    children_count = serializers.IntegerField(read_only=True)
    meta = serializers.SerializerMethodField()
    contents = serializers.SerializerMethodField()
    media = PageMediaSerializer(many=True, read_only=True)

    class Meta:
        model = Page
        fields = [
            "id",
            "title",
            "slug",
            "uri",
            "parent_id",
            "template",
            "is_stand_alone",
            "has_fixed_template",
            "has_fixed_uri",
            "is_deletable",
            "is_published",
            "published_at",
            "order",
            "children_count",
            "meta",
            "contents",
            "media",
            "created_at",
            "updated_at",
        ]

    def get_meta(self, obj):
        return {meta.key: meta.value for meta in obj.meta_entries.all()}

    def get_contents(self, obj):
        return {content.key: content.value for content in obj.contents.all()}


class PublicPageSerializer(serializers.ModelSerializer):
    """What site visitors see; admin flags and ranks stay private."""

    component_name = serializers.CharField(source="template.component_name", read_only=True)
    meta = serializers.SerializerMethodField()
    contents = serializers.SerializerMethodField()
    media = PageMediaSerializer(many=True, read_only=True)

    class Meta:
        model = Page
        fields = ["id", "title", "uri", "component_name", "published_at", "meta", "contents", "media"]

    def get_meta(self, obj):
        return {meta.key: meta.value for meta in obj.meta_entries.all()}

    def get_contents(self, obj):
        return {content.key: content.value for content in obj.contents.all()}


class PageMetaInputSerializer(serializers.Serializer):
    title = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


class PageWriteSerializer(serializers.Serializer):
    """
    Core page fields shared by every template. Template specific fields are
    validated separately by the template's handler.

    Pass the page being updated as context["page"].
    """

    title = serializers.CharField(max_length=255)
    slug = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    template_id = serializers.PrimaryKeyRelatedField(queryset=PageTemplate.objects.all())
    parent_id = serializers.PrimaryKeyRelatedField(
        queryset=Page.all_objects.all(),
        required=False,
        allow_null=True,
    )
    is_stand_alone = serializers.BooleanField()
    is_published = serializers.BooleanField()
    meta = PageMetaInputSerializer(required=False)

    def validate_template_id(self, template):
        try:
            template.get_handler()
        except UnknownTemplateHandler as exc:
            raise serializers.ValidationError(str(exc))
        return template

    def validate_parent_id(self, parent):
        page = self.context.get("page")
        if parent is None or page is None:
            return parent

        # walk up from the new parent; meeting the page itself means a cycle
        seen = set()
        node = parent
        while node is not None and node.pk not in seen:
            if node.pk == page.pk:
                raise serializers.ValidationError("A page cannot be nested under itself or its descendants.")
            seen.add(node.pk)
            node = node.parent
        return parent

    def validate(self, attrs):
        attrs.setdefault("parent_id", None)
        attrs["meta"] = attrs.get("meta") or {"title": None, "description": None}
        return attrs


class PageReorderSerializer(serializers.Serializer):
    pages = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)

    def validate_pages(self, ids):
        existing = set(Page.all_objects.filter(pk__in=ids).values_list("pk", flat=True))
        missing = [pk for pk in ids if pk not in existing]
        if missing:
            raise serializers.ValidationError(
                f"Unknown page ids: {', '.join(str(pk) for pk in missing)}"
            )
        return ids
