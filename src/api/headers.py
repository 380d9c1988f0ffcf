"""
Response header helpers: pagination links and entity alert headers.

Pagination follows the usual REST convention: ``X-Total-Count`` carries the
size of the filtered set and ``Link`` carries next/prev/last/first URLs built
from the current request URL with ``page`` and ``size`` replaced.
"""

from __future__ import annotations

from typing import Any

from starlette.datastructures import URL
from src.core.config import get_settings
from src.domain.pagination import Page


def _page_link(url: URL, page: int, size: int, rel: str) -> str:
    target = url.include_query_params(page=page, size=size)
    return f'<{target}>; rel="{rel}"'


def pagination_headers(url: URL, page: Page[Any]) -> dict[str, str]:
    links: list[str] = []
    if page.has_next:
        links.append(_page_link(url, page.page + 1, page.size, "next"))
    if page.has_previous:
        links.append(_page_link(url, page.page - 1, page.size, "prev"))
    last_page = page.total_pages - 1 if page.total_pages > 0 else 0
    links.append(_page_link(url, last_page, page.size, "last"))
    links.append(_page_link(url, 0, page.size, "first"))
    return {
        "X-Total-Count": str(page.total_elements),
        "Link": ",".join(links),
    }


def alert_headers(message: str, param: str) -> dict[str, str]:
    app_name = get_settings().client_app_name
    return {
        f"X-{app_name}-alert": message,
        f"X-{app_name}-params": param,
    }


def entity_creation_alert(entity_name: str, entity_id: str) -> dict[str, str]:
    app_name = get_settings().client_app_name
    return alert_headers(f"{app_name}.{entity_name}.created", entity_id)


def entity_update_alert(entity_name: str, entity_id: str) -> dict[str, str]:
    app_name = get_settings().client_app_name
    return alert_headers(f"{app_name}.{entity_name}.updated", entity_id)


def entity_deletion_alert(entity_name: str, entity_id: str) -> dict[str, str]:
    app_name = get_settings().client_app_name
    return alert_headers(f"{app_name}.{entity_name}.deleted", entity_id)


def failure_alert(entity_name: str, error_key: str) -> dict[str, str]:
    app_name = get_settings().client_app_name
    return {
        f"X-{app_name}-error": f"error.{error_key}",
        f"X-{app_name}-params": entity_name,
    }
