# pages/handlers.py
"""
Template handlers.

Every PageTemplate points at a handler key. The handler validates the
template's own fields from the request and stores them on the page as
contents (and media references). Views only ever call `validate` and `save`.

Register your own:

    from pages.handlers import TemplateHandler, register

    @register("faq")
    class FaqTemplateHandler(TemplateHandler):
        serializer_class = FaqSerializer

and list the module in settings.PAGES_TEMPLATE_HANDLER_MODULES.
"""
import logging

from rest_framework import serializers

from .exceptions import TemplateHandlerError, UnknownTemplateHandler

logger = logging.getLogger(__name__)

_registry = {}


def register(key: str):
    def decorator(cls):
        cls.key = key
        _registry[key] = cls()
        return cls

    return decorator


def get_handler(key: str):
    try:
        return _registry[key]
    except KeyError:
        raise UnknownTemplateHandler(key) from None


def registered_handlers() -> dict:
    return dict(_registry)


class TemplateHandler:
    key = None
    serializer_class = None
    # request field -> media group
    media_fields = {}

    def get_serializer(self, request):
        return self.serializer_class(data=request.data, context={"request": request})

    def validate(self, request) -> dict:
        if self.serializer_class is None:
            return {}
        serializer = self.get_serializer(request)
        if not serializer.is_valid():
            raise TemplateHandlerError(serializer.errors)
        return dict(serializer.validated_data)

    def save(self, page, request):
        data = self.validate(request)

        contents = {k: v for k, v in data.items() if k not in self.media_fields}
        if contents:
            page.add_contents(contents)

        for field, group in self.media_fields.items():
            media_id = data.get(field)
            if media_id:
                page.attach_media(media_id, group)

        logger.debug("Saved %s template fields for page %s", self.key, page.pk)


class DefaultContentSerializer(serializers.Serializer):
    content = serializers.CharField()


class LandingContentSerializer(serializers.Serializer):
    headline = serializers.CharField(max_length=255)
    intro = serializers.CharField(required=False, allow_blank=True, default="")
    call_to_action_url = serializers.URLField(required=False, allow_blank=True, default="")
    hero_image_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)


@register("default")
class DefaultTemplateHandler(TemplateHandler):
    serializer_class = DefaultContentSerializer


@register("landing")
class LandingTemplateHandler(TemplateHandler):
    serializer_class = LandingContentSerializer
    media_fields = {"hero_image_id": "hero"}


@register("container")
class ContainerTemplateHandler(TemplateHandler):
    """Structural pages that only group children; no fields of their own."""
