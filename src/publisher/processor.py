"""CMS content preparation."""

from __future__ import annotations

from bs4 import BeautifulSoup


def prepare_for_cms(html: str) -> str:
    """Return the article body ready for the Odoo blog.

    Odoo renders the post title itself, so the first <h1> is removed to
    avoid showing the title twice. lxml wraps fragments in <html><body>;
    only the body's children are returned.
    """
    soup = BeautifulSoup(html, "lxml")
    body = soup.find("body")
    if body is None:
        return html

    first_h1 = body.find("h1")
    if first_h1:
        first_h1.decompose()

    return "".join(str(child) for child in body.children).strip()
