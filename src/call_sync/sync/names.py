"""Contact name extraction from 3C mailing metadata.

Mailing metadata is vendor-controlled: key names vary per campaign upload and
values may carry HTML. Extraction is a best-effort heuristic, not a contract
with the upstream vendor:

1. Unwrap ``{"data": ...}`` and take the first element of a collection.
2. Try an ordered list of known key spellings.
3. Fall back to any key whose lower-cased name contains a name-like token.
"""

from __future__ import annotations

import re
from typing import Any

from src.call_sync.sync.schemas import DerivedName

PLACEHOLDER_NAME = "Lead 3C"

NAME_KEYS: tuple[str, ...] = ("Nome", "nome", "NOME", "name", "Name", "NAME")
NAME_KEY_TOKENS: tuple[str, ...] = ("name", "nome", "cliente", "customer")

HTML_ENTITIES: dict[str, str] = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
}

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_QUOTES = "\"'`“”‘’"


def sanitize_name(value: Any) -> str | None:
    """Strip markup and noise from a raw name value.

    Returns None when nothing usable is left (empty or the "-" placeholder).
    """
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = _TAG_RE.sub(" ", str(value))
    for entity, replacement in HTML_ENTITIES.items():
        text = text.replace(entity, replacement)
    text = text.strip().strip(_QUOTES)
    text = _WHITESPACE_RE.sub(" ", text).strip()
    if not text or text == "-":
        return None
    return text


def _first_mailing_row(metadata: Any) -> dict[str, Any] | None:
    if isinstance(metadata, dict) and "data" in metadata and isinstance(
        metadata["data"], (dict, list)
    ):
        metadata = metadata["data"]
    if isinstance(metadata, list):
        metadata = metadata[0] if metadata else None
    return metadata if isinstance(metadata, dict) else None


def extract_name(metadata: Any) -> str | None:
    """Find and sanitize a contact name in mailing metadata."""
    row = _first_mailing_row(metadata)
    if not row:
        return None

    for key in NAME_KEYS:
        name = sanitize_name(row.get(key))
        if name:
            return name

    for key, value in row.items():
        lowered = str(key).lower()
        if any(token in lowered for token in NAME_KEY_TOKENS):
            name = sanitize_name(value)
            if name:
                return name

    return None


def derive_name(metadata: Any, placeholder: str = PLACEHOLDER_NAME) -> DerivedName:
    """Extracted name, or the placeholder flagged as generic."""
    name = extract_name(metadata)
    if name is None:
        return DerivedName(value=placeholder, is_generic=True)
    return DerivedName(value=name, is_generic=False)
