"""Odoo CMS REST client.

Talks to the Odoo REST API under ``{url}/api/v1`` with a Bearer API key.
Every transport or HTTP error is raised as ExternalServiceError.

Usage:
    client = OdooClient.from_settings(settings.odoo)
    post_id = client.create_blog_post(title, html, meta, blog_id)
    client.publish_blog_post(post_id)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from src.common.config import OdooSettings
from src.common.exceptions import ConfigurationError, ExternalServiceError

logger = logging.getLogger(__name__)


class OdooClient:
    """Thin wrapper over a requests.Session bound to one Odoo instance."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        database: str = "odoo",
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not base_url or not api_key:
            raise ConfigurationError("Odoo URL and API key are required")
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}/api/v1"
        self.database = database
        self.timeout = timeout

        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            }
        )

    @classmethod
    def from_settings(cls, odoo: OdooSettings) -> OdooClient:
        return cls(odoo.url, odoo.api_key, odoo.database, odoo.timeout)

    # --- Transport ---

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.api_url}{path}"
        try:
            resp = self._session.request(
                method, url, params=params, json=json, timeout=self.timeout
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Odoo %s %s failed: %s", method, path, exc)
            raise ExternalServiceError(f"Odoo request {method} {path} failed: {exc}") from exc

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise ExternalServiceError(f"Odoo returned invalid JSON for {path}") from exc

    # --- Read ---

    def test_connection(self) -> bool:
        """True when /version answers; connection problems are logged, not raised."""
        try:
            self._request("GET", "/version")
            return True
        except ExternalServiceError:
            return False

    def get_products(self, limit: int = 50) -> list[dict[str, Any]]:
        """Product templates as {id, name, description, category, price}."""
        data = self._request(
            "GET",
            "/records/product.template",
            params={"limit": limit, "fields": "id,name,description,categ_id,list_price"},
        ) or []
        products = []
        for item in data:
            categ = item.get("categ_id")
            products.append(
                {
                    "id": item["id"],
                    "name": item.get("name", ""),
                    "description": item.get("description") or "",
                    # many2one fields come back as [id, display_name]
                    "category": categ[1] if isinstance(categ, list) and len(categ) > 1 else "",
                    "price": item.get("list_price") or 0,
                }
            )
        return products

    def get_categories(self) -> list[dict[str, Any]]:
        data = self._request(
            "GET",
            "/records/product.category",
            params={"fields": "id,name,complete_name"},
        ) or []
        return [
            {"id": item["id"], "name": item.get("complete_name") or item.get("name", "")}
            for item in data
        ]

    def get_blogs(self) -> list[dict[str, Any]]:
        data = self._request(
            "GET", "/records/blog.blog", params={"fields": "id,name"}
        ) or []
        return [{"id": item["id"], "name": item.get("name", "")} for item in data]

    # --- Write ---

    def create_blog_post(
        self,
        title: str,
        html_content: str,
        meta_description: str,
        blog_id: int,
        is_published: bool = False,
        tag_ids: Optional[list[int]] = None,
    ) -> int:
        """Create a blog.post record and return its Odoo id."""
        data = self._request(
            "POST",
            "/records/blog.post",
            json={
                "name": title,
                "content": html_content,
                "blog_id": blog_id,
                "tag_ids": tag_ids or [],
                "meta_description": meta_description,
                "is_published": is_published,
            },
        )
        post_id = data.get("id") if isinstance(data, dict) else None
        if not post_id:
            raise ExternalServiceError("Odoo did not return an id for the new blog post")
        logger.info("Created Odoo blog post %s: %s", post_id, title)
        return int(post_id)

    def update_blog_post(self, post_id: int, **fields: Any) -> None:
        self._request("PUT", f"/records/blog.post/{post_id}", json=fields)

    def publish_blog_post(self, post_id: int) -> None:
        self.update_blog_post(post_id, is_published=True)
        logger.info("Published Odoo blog post %s", post_id)

    def close(self) -> None:
        self._session.close()
