# pages/views.py
import logging

from django.db import transaction
from django.db.models import Count
from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import UnknownTemplateHandler
from .models import Page, PageTemplate
from .permissions import IsPageAdmin
from .serializers import (
    PageReorderSerializer,
    PageSerializer,
    PageTemplateSerializer,
    PageWriteSerializer,
    PublicPageSerializer,
)
from .services import get_page_for_path
from .tasks import update_page_uri

logger = logging.getLogger(__name__)


def _page_queryset():
    return Page.all_objects.select_related("template").prefetch_related(
        "contents", "meta_entries", "media"
    )


class PageViewSet(viewsets.ViewSet):
    """
    Admin CRUD for pages, drafts included.

      GET    /api/pages/?parent=root|<id>
      POST   /api/pages/
      GET    /api/pages/<id>/
      PUT    /api/pages/<id>/   (PATCH takes the same body)
      PUT    /api/pages/reorder/  {"pages": [3, 1, 2]}
      DELETE /api/pages/<id>/
    """

    permission_classes = [IsPageAdmin]
    lookup_value_regex = r"\d+"

    def list(self, request):
        pages = (
            _page_queryset()
            .annotate(children_count=Count("children"))
            .filter_by_params(request.query_params)
            .order_by("order", "id")
        )
        return Response(PageSerializer(pages, many=True, context={"request": request}).data)

    def create(self, request):
        serializer = PageWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        template = data["template_id"]
        handler = template.get_handler()
        handler.validate(request)

        with transaction.atomic():
            page = Page(
                title=data["title"],
                slug=data.get("slug") or "",
                parent=data["parent_id"],
                template=template,
                is_stand_alone=data["is_stand_alone"],
                order=Page.next_order(),
            )
            page.save()

            page.set_meta("title", data["meta"]["title"])
            page.set_meta("description", data["meta"]["description"])

            handler.save(page, request)

            if data["is_published"]:
                page.publish()

        update_page_uri.delay(page.pk)
        logger.info("Created page %s (%s) with template %s", page.pk, page.slug, template.handler)

        page = _page_queryset().get(pk=page.pk)
        return Response(
            PageSerializer(page, context={"request": request}).data,
            status=status.HTTP_201_CREATED,
        )

    def retrieve(self, request, pk=None):
        page = get_object_or_404(_page_queryset(), pk=pk)
        return Response(PageSerializer(page, context={"request": request}).data)

    def update(self, request, pk=None):
        page = get_object_or_404(Page.all_objects.select_related("template"), pk=pk)

        serializer = PageWriteSerializer(data=request.data, context={"page": page})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        template = page.template if page.has_fixed_template else data["template_id"]
        try:
            handler = template.get_handler()
        except UnknownTemplateHandler as exc:
            # the page's own fixed template may have lost its handler
            raise ValidationError({"template_id": [str(exc)]})
        handler.validate(request)

        with transaction.atomic():
            page.title = data["title"]
            if not page.has_fixed_uri:
                page.slug = data.get("slug") or ""
            page.parent = data["parent_id"]
            page.template = template
            page.is_stand_alone = data["is_stand_alone"]
            page.save()

            page.sync_meta(
                {
                    "title": data["meta"]["title"],
                    "description": data["meta"]["description"],
                }
            )

            page.detach_media()
            page.delete_contents()

            handler.save(page, request)

            if page.is_draft and data["is_published"]:
                page.publish()
            elif page.is_published and not data["is_published"]:
                page.draft()

        if not page.has_fixed_uri:
            update_page_uri.delay(page.pk)
        logger.info("Updated page %s (%s)", page.pk, page.slug)

        page = _page_queryset().get(pk=page.pk)
        return Response(PageSerializer(page, context={"request": request}).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @action(detail=False, methods=["put"], url_path="reorder")
    def reorder(self, request):
        serializer = PageReorderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ids = serializer.validated_data["pages"]

        # pages missing from the list keep their old rank
        with transaction.atomic():
            for order, page_id in enumerate(ids, start=1):
                Page.all_objects.filter(pk=page_id).update(order=order)

        logger.info("Reordered %s pages", len(ids))
        return Response(status=status.HTTP_204_NO_CONTENT)

    def destroy(self, request, pk=None):
        page = get_object_or_404(Page.all_objects.filter(is_deletable=True), pk=pk)
        # fixed-uri children keep their stored uri
        child_ids = list(page.children.filter(has_fixed_uri=False).values_list("pk", flat=True))

        page.delete()
        logger.info("Deleted page %s", pk)

        # detached to the root, so the old parent prefix must go
        for child_id in child_ids:
            update_page_uri.delay(child_id)

        return Response(status=status.HTTP_204_NO_CONTENT)


class PageTemplateListView(generics.ListAPIView):
    """
    GET /api/page-templates/
    """

    queryset = PageTemplate.objects.all()
    serializer_class = PageTemplateSerializer
    permission_classes = [IsPageAdmin]
    pagination_class = None


class PublicPageDetailView(APIView):
    """
    GET /api/public/pages/<uri>/

    Published pages only; drafts answer 404 like missing pages.
    """

    permission_classes = [permissions.AllowAny]

    def get(self, request, uri: str):
        page = get_page_for_path(uri)
        return Response(PublicPageSerializer(page, context={"request": request}).data)
