import pytest
from rest_framework.test import APIClient

from pages.models import Page, PageContent, PageTemplate

PAGES_URL = "/api/pages/"


def detail_url(pk):
    return f"{PAGES_URL}{pk}/"


# ---------------------------------------------------------------------------
# Access
# ---------------------------------------------------------------------------


@pytest.mark.django_db
def test_anonymous_requests_are_rejected():
    r = APIClient().get(PAGES_URL)
    assert r.status_code == 401


@pytest.mark.django_db
def test_non_staff_users_are_forbidden(django_user_model):
    user = django_user_model.objects.create_user(username="reader", password="pw")
    client = APIClient()
    client.force_authenticate(user=user)

    r = client.get(PAGES_URL)
    assert r.status_code == 403


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


@pytest.mark.django_db
def test_create_root_page(api, payload):
    r = api.post(PAGES_URL, payload(), format="json")

    assert r.status_code == 201
    body = r.json()
    assert body["slug"] == "about"
    assert body["uri"] == "about"
    assert body["is_published"] is False
    assert body["published_at"] is None
    assert body["contents"] == {"content": "Hello"}
    assert body["meta"] == {"title": None, "description": None}
    assert body["template"]["component_name"] == "DefaultPage"

    page = Page.all_objects.get(pk=body["id"])
    assert page.uri == "about"
    assert page.is_draft
    assert page.order == 1


@pytest.mark.django_db
def test_create_child_page(api, payload):
    about = api.post(PAGES_URL, payload(), format="json").json()

    r = api.post(PAGES_URL, payload(title="Team", parent_id=about["id"]), format="json")

    assert r.status_code == 201
    assert Page.all_objects.get(pk=r.json()["id"]).uri == "about/team"


@pytest.mark.django_db
def test_create_same_title_twice_gives_distinct_slugs(api, payload):
    first = api.post(PAGES_URL, payload(), format="json").json()
    second = api.post(PAGES_URL, payload(), format="json").json()

    assert first["slug"] == "about"
    assert second["slug"] == "about-1"
    assert second["order"] == first["order"] + 1


@pytest.mark.django_db
def test_create_with_explicit_slug_and_meta(api, payload):
    r = api.post(
        PAGES_URL,
        payload(slug="Who We Are", meta={"title": "About us", "description": "The team"}),
        format="json",
    )

    body = r.json()
    assert body["slug"] == "who-we-are"
    assert body["meta"] == {"title": "About us", "description": "The team"}


@pytest.mark.django_db
def test_create_published_page(api, payload):
    r = api.post(PAGES_URL, payload(is_published=True), format="json")

    body = r.json()
    assert body["is_published"] is True
    assert body["published_at"] is not None


@pytest.mark.django_db
@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"title": ""}, "title"),
        ({"template_id": 999}, "template_id"),
        ({"parent_id": 999}, "parent_id"),
        ({"is_stand_alone": None}, "is_stand_alone"),
        ({"is_published": "maybe"}, "is_published"),
    ],
)
def test_create_rejects_invalid_core_fields(api, payload, overrides, field):
    r = api.post(PAGES_URL, payload(**overrides), format="json")

    assert r.status_code == 400
    assert field in r.json()
    assert not Page.all_objects.exists()


@pytest.mark.django_db
def test_create_requires_boolean_flags(api, payload):
    data = payload()
    del data["is_stand_alone"]
    del data["is_published"]

    r = api.post(PAGES_URL, data, format="json")

    assert r.status_code == 400
    assert {"is_stand_alone", "is_published"} <= set(r.json())


@pytest.mark.django_db
def test_create_rejects_invalid_template_fields(api, payload):
    data = payload()
    del data["content"]

    r = api.post(PAGES_URL, data, format="json")

    assert r.status_code == 400
    assert "content" in r.json()
    assert not Page.all_objects.exists()


@pytest.mark.django_db
def test_create_rejects_template_without_registered_handler(api, payload):
    broken = PageTemplate.objects.create(name="Broken", component_name="Broken", handler="gone")

    r = api.post(PAGES_URL, payload(template_id=broken.pk), format="json")

    assert r.status_code == 400
    assert "template_id" in r.json()


@pytest.mark.django_db
def test_create_landing_page_attaches_media(api, payload, landing_template):
    r = api.post(
        PAGES_URL,
        payload(title="Home", template_id=landing_template.pk, headline="Welcome", hero_image_id=12),
        format="json",
    )

    assert r.status_code == 201
    body = r.json()
    assert body["contents"]["headline"] == "Welcome"
    assert body["media"] == [{"media_id": 12, "group": "hero"}]


# ---------------------------------------------------------------------------
# List / show
# ---------------------------------------------------------------------------


@pytest.mark.django_db
def test_list_includes_drafts_and_child_counts(api, make_page):
    about = make_page("About")
    make_page("Team", parent=about)
    contact = make_page("Contact")
    contact.publish()

    r = api.get(PAGES_URL)

    assert r.status_code == 200
    body = r.json()
    assert [p["slug"] for p in body] == ["about", "team", "contact"]
    assert body[0]["children_count"] == 1
    assert body[2]["children_count"] == 0


@pytest.mark.django_db
def test_list_filters_by_parent(api, make_page):
    about = make_page("About")
    make_page("Team", parent=about)
    make_page("Contact")

    roots = api.get(PAGES_URL, {"parent": "root"}).json()
    children = api.get(PAGES_URL, {"parent": about.pk}).json()

    assert [p["slug"] for p in roots] == ["about", "contact"]
    assert [p["slug"] for p in children] == ["team"]
    assert api.get(PAGES_URL, {"parent": "abc"}).status_code == 400


@pytest.mark.django_db
def test_list_is_ordered_by_rank(api, make_page):
    a = make_page("A")
    b = make_page("B")
    Page.all_objects.filter(pk=a.pk).update(order=5)

    slugs = [p["slug"] for p in api.get(PAGES_URL).json()]
    assert slugs == [b.slug, a.slug]


@pytest.mark.django_db
def test_show_includes_drafts(api, make_page):
    page = make_page("About")
    page.add_contents({"body": "Hi"})

    r = api.get(detail_url(page.pk))

    assert r.status_code == 200
    assert r.json()["contents"] == {"body": "Hi"}
    assert "children_count" not in r.json()


@pytest.mark.django_db
def test_show_missing_page_is_404(api):
    assert api.get(detail_url(999)).status_code == 404


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


@pytest.mark.django_db
def test_update_changes_slug_uri_and_descendants(api, payload):
    about = api.post(PAGES_URL, payload(), format="json").json()
    team = api.post(PAGES_URL, payload(title="Team", parent_id=about["id"]), format="json").json()

    r = api.put(detail_url(about["id"]), payload(title="Company"), format="json")

    assert r.status_code == 200
    assert r.json()["slug"] == "company"
    assert Page.all_objects.get(pk=about["id"]).uri == "company"
    assert Page.all_objects.get(pk=team["id"]).uri == "company/team"


@pytest.mark.django_db
def test_update_replaces_contents_media_and_syncs_meta(api, payload, landing_template):
    data = payload(template_id=landing_template.pk, headline="Old", intro="Old intro", hero_image_id=3)
    page = api.post(PAGES_URL, data, format="json").json()

    r = api.put(
        detail_url(page["id"]),
        payload(template_id=landing_template.pk, headline="New", meta={"title": "SEO"}),
        format="json",
    )

    body = r.json()
    assert body["contents"]["headline"] == "New"
    assert body["contents"]["intro"] == ""
    assert body["media"] == []
    assert body["meta"]["title"] == "SEO"
    assert PageContent.objects.filter(page_id=page["id"], key="headline").count() == 1


@pytest.mark.django_db
def test_update_fixed_uri_page_keeps_slug_and_uri(api, payload, make_page):
    home = make_page("Home", has_fixed_uri=True)

    r = api.put(detail_url(home.pk), payload(title="Welcome", slug="welcome"), format="json")

    assert r.status_code == 200
    home.refresh_from_db()
    assert home.title == "Welcome"
    assert home.slug == "home"
    assert home.uri == "home"


@pytest.mark.django_db
def test_update_fixed_template_page_keeps_template(api, payload, make_page, template, landing_template):
    home = make_page("Home", template=landing_template, has_fixed_template=True)

    data = payload(title="Home", template_id=template.pk, headline="Hello")
    del data["content"]
    r = api.put(detail_url(home.pk), data, format="json")

    assert r.status_code == 200
    home.refresh_from_db()
    assert home.template_id == landing_template.pk
    assert home.get_content("headline") == "Hello"


@pytest.mark.django_db
def test_update_validates_with_the_fixed_template_handler(api, payload, make_page, landing_template):
    home = make_page("Home", template=landing_template, has_fixed_template=True)

    r = api.put(detail_url(home.pk), payload(title="Home"), format="json")

    assert r.status_code == 400
    assert "headline" in r.json()


@pytest.mark.django_db
def test_update_fixed_template_without_registered_handler_is_400(api, payload, make_page):
    broken = PageTemplate.objects.create(name="Broken", component_name="Broken", handler="gone")
    page = make_page("Legacy", template=broken, has_fixed_template=True)

    r = api.put(detail_url(page.pk), payload(title="Legacy"), format="json")

    assert r.status_code == 400
    assert "gone" in str(r.json()["template_id"])
    page.refresh_from_db()
    assert page.template_id == broken.pk


@pytest.mark.django_db
def test_update_publish_transitions(api, payload):
    page = api.post(PAGES_URL, payload(), format="json").json()
    url = detail_url(page["id"])

    published = api.put(url, payload(is_published=True), format="json").json()
    assert published["is_published"] is True
    stamp = published["published_at"]
    assert stamp is not None

    again = api.put(url, payload(is_published=True), format="json").json()
    assert again["published_at"] == stamp

    drafted = api.put(url, payload(is_published=False), format="json").json()
    assert drafted["is_published"] is False
    assert drafted["published_at"] is None


@pytest.mark.django_db
def test_update_rejects_moving_page_under_itself(api, payload):
    about = api.post(PAGES_URL, payload(), format="json").json()
    team = api.post(PAGES_URL, payload(title="Team", parent_id=about["id"]), format="json").json()

    under_child = api.put(detail_url(about["id"]), payload(parent_id=team["id"]), format="json")
    under_self = api.put(detail_url(about["id"]), payload(parent_id=about["id"]), format="json")

    assert under_child.status_code == 400
    assert "parent_id" in under_child.json()
    assert under_self.status_code == 400


@pytest.mark.django_db
def test_patch_uses_the_same_rules(api, payload):
    page = api.post(PAGES_URL, payload(), format="json").json()

    r = api.patch(detail_url(page["id"]), payload(title="Careers"), format="json")

    assert r.status_code == 200
    assert r.json()["slug"] == "careers"


@pytest.mark.django_db
def test_update_missing_page_is_404(api, payload):
    assert api.put(detail_url(999), payload(), format="json").status_code == 404


# ---------------------------------------------------------------------------
# Reorder
# ---------------------------------------------------------------------------


@pytest.mark.django_db
def test_reorder_assigns_ranks_in_list_order(api, make_page):
    one = make_page("One")
    two = make_page("Two")
    three = make_page("Three")

    r = api.put(f"{PAGES_URL}reorder/", {"pages": [three.pk, one.pk, two.pk]}, format="json")

    assert r.status_code == 204
    ranks = dict(Page.all_objects.values_list("pk", "order"))
    assert ranks == {three.pk: 1, one.pk: 2, two.pk: 3}


@pytest.mark.django_db
def test_reorder_leaves_unlisted_pages_alone(api, make_page):
    one = make_page("One")
    two = make_page("Two")
    three = make_page("Three")

    api.put(f"{PAGES_URL}reorder/", {"pages": [three.pk]}, format="json")

    ranks = dict(Page.all_objects.values_list("pk", "order"))
    assert ranks == {one.pk: 1, two.pk: 2, three.pk: 1}


@pytest.mark.django_db
def test_reorder_rejects_unknown_ids(api, make_page):
    one = make_page("One")

    r = api.put(f"{PAGES_URL}reorder/", {"pages": [one.pk, 999]}, format="json")

    assert r.status_code == 400
    assert "999" in str(r.json()["pages"])
    one.refresh_from_db()
    assert one.order == 1


@pytest.mark.django_db
def test_reorder_requires_pages(api):
    assert api.put(f"{PAGES_URL}reorder/", {}, format="json").status_code == 400


# ---------------------------------------------------------------------------
# Destroy
# ---------------------------------------------------------------------------


@pytest.mark.django_db
def test_destroy_deletes_page_and_contents(api, make_page):
    page = make_page("About")
    page.add_contents({"body": "x"})

    r = api.delete(detail_url(page.pk))

    assert r.status_code == 204
    assert not Page.all_objects.filter(pk=page.pk).exists()
    assert not PageContent.objects.exists()


@pytest.mark.django_db
def test_destroy_non_deletable_page_is_404(api, make_page):
    page = make_page("Home", is_deletable=False)

    r = api.delete(detail_url(page.pk))

    assert r.status_code == 404
    assert Page.all_objects.filter(pk=page.pk).exists()


@pytest.mark.django_db
def test_destroy_missing_page_is_404(api):
    assert api.delete(detail_url(999)).status_code == 404


@pytest.mark.django_db
def test_destroy_detaches_children_to_root(api, make_page):
    about = make_page("About")
    team = make_page("Team", parent=about)

    api.delete(detail_url(about.pk))

    team.refresh_from_db()
    assert team.parent_id is None
    assert team.uri == "team"


@pytest.mark.django_db
def test_destroy_keeps_uri_of_fixed_uri_children(api, make_page):
    about = make_page("About")
    home = make_page("Home", parent=about, has_fixed_uri=True)
    assert home.uri == "about/home"

    api.delete(detail_url(about.pk))

    home.refresh_from_db()
    assert home.parent_id is None
    assert home.uri == "about/home"


# ---------------------------------------------------------------------------
# Templates / public lookup
# ---------------------------------------------------------------------------


@pytest.mark.django_db
def test_list_page_templates(api, template, container_template):
    r = api.get("/api/page-templates/")

    assert r.status_code == 200
    assert r.json() == [
        {"id": container_template.pk, "name": "Container", "component_name": "ContainerPage", "is_selectable": False},
        {"id": template.pk, "name": "Default", "component_name": "DefaultPage", "is_selectable": True},
    ]


@pytest.mark.django_db
def test_public_lookup_serves_published_pages_by_uri(make_page):
    about = make_page("About")
    team = make_page("Team", parent=about)
    team.publish()
    client = APIClient()

    ok = client.get("/api/public/pages/about/team/")
    draft = client.get("/api/public/pages/about/")

    assert ok.status_code == 200
    assert ok.json()["id"] == team.pk
    assert draft.status_code == 404


@pytest.mark.django_db
def test_public_lookup_hides_admin_fields(make_page):
    page = make_page("About")
    page.add_contents({"content": "Hi"})
    page.set_meta("title", "About us")
    page.publish()

    body = APIClient().get("/api/public/pages/about/").json()

    assert body["uri"] == "about"
    assert body["component_name"] == "DefaultPage"
    assert body["contents"] == {"content": "Hi"}
    assert body["meta"] == {"title": "About us"}
    for field in ("is_deletable", "has_fixed_uri", "has_fixed_template", "order", "updated_at"):
        assert field not in body
