# src/backend/utils/slug.py
import re
import unicodedata

_NOT_SLUG = re.compile(r"[^a-z0-9-]")
_HYPHENS = re.compile(r"-+")


def normalize_slug(value: str) -> str:
    """
    URL-friendly slug: lowercase, accents stripped, spaces to hyphens,
    anything outside [a-z0-9-] dropped, hyphen runs collapsed and trimmed.

    "Workshop Bronkoskopi Tingkat Lanjut" -> "workshop-bronkoskopi-tingkat-lanjut"
    """
    if not value:
        return ""
    slug = unicodedata.normalize("NFD", value.lower())
    slug = "".join(ch for ch in slug if unicodedata.category(ch) != "Mn")
    slug = slug.replace(" ", "-")
    slug = _NOT_SLUG.sub("", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")
