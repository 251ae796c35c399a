# pages/services.py
import logging
from collections import deque

from django.shortcuts import get_object_or_404

from .models import Page

logger = logging.getLogger(__name__)


def update_page_uri(page_id: int) -> int:
    """
    Recompute the uri of a page and of everything below it.

    Walks the tree breadth first with an explicit queue, so deep trees never
    recurse. Only rows whose uri actually changes are written, which makes
    repeated runs no-ops. Descendants with a fixed uri keep it, and so does
    their subtree. Returns the number of rows updated.
    """
    page = Page.all_objects.select_related("parent").filter(pk=page_id).first()
    if page is None:
        return 0

    updated = 0
    seen = set()
    queue = deque([page])

    while queue:
        current = queue.popleft()
        if current.pk in seen:
            continue
        seen.add(current.pk)

        if current is not page and current.has_fixed_uri and current.uri:
            continue

        uri = current.generate_uri()
        if uri != current.uri:
            Page.all_objects.filter(pk=current.pk).update(uri=uri)
            logger.info("Page %s uri changed %r -> %r", current.pk, current.uri, uri)
            current.uri = uri
            updated += 1

        for child in Page.all_objects.filter(parent_id=current.pk):
            child.parent = current
            queue.append(child)

    return updated


def get_page_for_path(path: str) -> Page:
    """Published page whose uri matches a request path, or 404."""
    uri = (path or "").strip("/")
    return get_object_or_404(
        Page.objects.select_related("template").prefetch_related("contents", "meta_entries", "media"),
        uri=uri,
    )
