# pages/admin.py
from django.contrib import admin

from .models import Page, PageContent, PageMedia, PageMeta, PageTemplate
from .tasks import update_page_uri


class PageContentInline(admin.TabularInline):
    model = PageContent
    extra = 1
    fields = ("key", "value")


class PageMetaInline(admin.TabularInline):
    model = PageMeta
    extra = 0
    fields = ("key", "value")


class PageMediaInline(admin.TabularInline):
    model = PageMedia
    extra = 0
    fields = ("media_id", "group")


@admin.register(PageTemplate)
class PageTemplateAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "component_name", "handler", "is_selectable")
    list_filter = ("is_selectable", "handler")
    search_fields = ("name", "component_name")


@admin.register(Page)
class PageAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "uri", "template", "order", "published_at", "is_deletable")
    list_filter = ("template", "is_stand_alone", "has_fixed_uri", "is_deletable")
    search_fields = ("title", "slug", "uri")
    ordering = ("order", "id")
    readonly_fields = ("uri", "created_at", "updated_at")
    inlines = [PageMetaInline, PageContentInline, PageMediaInline]

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        if not change or not obj.has_fixed_uri:
            update_page_uri.delay(obj.pk)
