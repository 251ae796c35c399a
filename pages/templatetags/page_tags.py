"""Template tags for rendering page contents.

    {% load page_tags %}
    {% page_content page "headline" %}
    {{ page|content:"intro" }}
"""

from django import template

register = template.Library()


@register.simple_tag
def page_content(page, key: str):
    """Return the page's content for key, or an empty string when absent.

    Args:
        page: The Page being rendered.
        key: Content key, e.g. "headline".

    Returns:
        The stored value or "".

    """
    if page is None:
        return ""
    value = page.get_content(key)
    return "" if value is None else value


@register.filter(name="content")
def content_filter(page, key: str):
    """Filter form of page_content."""
    return page_content(page, key)
