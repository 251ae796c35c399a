import json
import logging
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from pages.exceptions import UnknownTemplateHandler
from pages.handlers import get_handler
from pages.models import Page, PageTemplate
from pages.slugs import base_slug
from pages.tasks import update_page_uri

logger = logging.getLogger(__name__)

DEFAULT_FILE = Path("fixtures/pages.json")

PAGE_FLAGS = ("is_stand_alone", "has_fixed_template", "has_fixed_uri", "is_deletable")


class Command(BaseCommand):
    help = (
        "Load/Update page templates and a page tree from a JSON file. "
        "This is the only way to create system pages with fixed uris/templates. "
        "Existing pages are matched by parent and slug (the title's slug when no slug is given)."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--file",
            help=f"Path to the JSON file to load (default: {DEFAULT_FILE})",
        )

    def handle(self, *args, **options):
        path = Path(options.get("file") or DEFAULT_FILE)
        if not path.exists():
            raise CommandError(f"File not found: {path}")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise CommandError(f"Invalid JSON in {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise CommandError("Expected an object with 'templates' and 'pages'")

        with transaction.atomic():
            templates = self.load_templates(data.get("templates", []))
            page_ids = self.load_pages(data.get("pages", []), templates)

        for page_id in page_ids:
            update_page_uri.delay(page_id)

        self.stdout.write(
            self.style.SUCCESS(f"Loaded {len(templates)} templates and {len(page_ids)} pages")
        )

    def load_templates(self, items):
        templates = {}
        for i, item in enumerate(items):
            if not isinstance(item, dict) or not item.get("name"):
                self.stdout.write(self.style.WARNING(f"Skipping template #{i}: missing 'name'"))
                continue

            handler = item.get("handler", "default")
            try:
                get_handler(handler)
            except UnknownTemplateHandler as exc:
                raise CommandError(str(exc)) from exc

            template, _ = PageTemplate.objects.update_or_create(
                name=item["name"],
                defaults={
                    "component_name": item.get("component_name", item["name"]),
                    "handler": handler,
                    "is_selectable": item.get("is_selectable", True),
                },
            )
            templates[template.name] = template
        return templates

    def load_pages(self, items, templates):
        page_ids = []
        # (item, parent) pairs; children are pushed as their parent is saved
        pending = [(item, None) for item in reversed(items)]

        while pending:
            item, parent = pending.pop()
            if not isinstance(item, dict) or not item.get("title"):
                self.stdout.write(self.style.WARNING("Skipping page: missing 'title'"))
                continue

            template_name = item.get("template")
            template = templates.get(template_name) or PageTemplate.objects.filter(name=template_name).first()
            if template is None:
                raise CommandError(f"Unknown template '{template_name}' for page '{item['title']}'")

            # matched on slug; an explicit "slug" keeps the match when the title changes
            slug = base_slug(item.get("slug") or item["title"])
            page = Page.all_objects.filter(parent=parent, slug=slug).first()
            if page is None:
                page = Page(parent=parent, slug=slug, order=Page.next_order())

            page.title = item["title"]
            page.template = template
            for flag in PAGE_FLAGS:
                if flag in item:
                    setattr(page, flag, bool(item[flag]))
            page.save()

            meta = item.get("meta") or {}
            if meta:
                page.sync_meta(meta)

            contents = item.get("contents")
            if isinstance(contents, dict):
                page.delete_contents()
                page.add_contents(contents)

            if item.get("is_published") and page.is_draft:
                page.publish()
            elif item.get("is_published") is False and page.is_published:
                page.draft()

            page_ids.append(page.pk)
            logger.info("Loaded page %s (%s)", page.pk, page.slug)

            for child in reversed(item.get("children") or []):
                pending.append((child, page))

        return page_ids
