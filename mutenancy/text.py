"""Display helpers shared by context levels: text formatting, strings and URLs."""

import html
import re

import httpx

from mutenancy.config import settings

_TAG_RE = re.compile(r"<[^>]*>")

STRINGS: dict[str, dict[str, str]] = {
    "core": {
        "system": "System",
        "user": "User",
        "category": "Category",
        "course": "Course",
    },
    "tenancy": {
        "tenant": "Tenant",
        "tenants": "Tenants",
    },
}


def format_string(text: str | None, escape: bool = True) -> str:
    """Strip markup from a display name and optionally HTML escape it."""
    if not text:
        return ""
    cleaned = _TAG_RE.sub("", text).strip()
    if escape:
        return html.escape(cleaned, quote=False)
    return cleaned


def get_string(key: str, component: str = "core") -> str:
    """Look up a display string; unknown keys come back bracketed so they stand out."""
    return STRINGS.get(component, {}).get(key, f"[[{key}]]")


def build_url(path: str, params: dict | None = None) -> httpx.URL:
    return httpx.URL(settings.wwwroot.rstrip("/") + path, params=params or {})
