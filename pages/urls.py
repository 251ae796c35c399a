# pages/urls.py
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import PageTemplateListView, PageViewSet, PublicPageDetailView

app_name = "pages"

router = DefaultRouter()
router.register(r"pages", PageViewSet, basename="page")

urlpatterns = [
    path("page-templates/", PageTemplateListView.as_view(), name="page_template_list"),
    path("public/pages/<path:uri>/", PublicPageDetailView.as_view(), name="public_page_detail"),
    path("", include(router.urls)),
]
