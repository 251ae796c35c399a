import pytest
from rest_framework.test import APIClient

from pages import services
from pages.models import Page, PageTemplate


@pytest.fixture
def template(db):
    return PageTemplate.objects.create(name="Default", component_name="DefaultPage", handler="default")


@pytest.fixture
def landing_template(db):
    return PageTemplate.objects.create(name="Landing", component_name="LandingPage", handler="landing")


@pytest.fixture
def container_template(db):
    return PageTemplate.objects.create(
        name="Container", component_name="ContainerPage", handler="container", is_selectable=False
    )


@pytest.fixture
def api(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def make_page(template):
    """Create a page the way the API does: save, then compute its uri."""

    def _make(title, parent=None, **kwargs):
        kwargs.setdefault("template", template)
        page = Page(title=title, parent=parent, order=Page.next_order(), **kwargs)
        page.save()
        services.update_page_uri(page.pk)
        page.refresh_from_db()
        return page

    return _make


@pytest.fixture
def payload(template):
    def _payload(**overrides):
        data = {
            "title": "About",
            "template_id": template.pk,
            "parent_id": None,
            "is_stand_alone": False,
            "is_published": False,
            "content": "Hello",
        }
        data.update(overrides)
        return data

    return _payload
