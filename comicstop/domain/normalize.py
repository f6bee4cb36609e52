"""
Explicit normalization of loosely shaped payload fields.

Multipart clients send list fields as JSON strings, single values, or
comma-separated text; JSON clients send real lists. Everything is turned
into plain ordered string lists and ContributorGroup values here, before
any entity is built, so no coercion happens inside the storage layer.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from comicstop.domain.entities import ContributorGroup
from comicstop.domain.errors import ErrorKind, LifecycleError


def _decode_json_text(value: str) -> Any:
    text = value.strip()
    if text.startswith("[") or text.startswith("{"):
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return value
    return value


def normalize_string_list(value: Any, *, split_commas: bool = False) -> list[str]:
    """
    Coerce a list-ish value to an ordered list of stripped, non-empty strings.

    Order is preserved and duplicates are kept; page order depends on both.
    """
    if value is None:
        return []
    if isinstance(value, str):
        decoded = _decode_json_text(value)
        if isinstance(decoded, str):
            if split_commas:
                return [part.strip() for part in decoded.split(",") if part.strip()]
            return [decoded.strip()] if decoded.strip() else []
        value = decoded
    if isinstance(value, Iterable) and not isinstance(value, (bytes, dict)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return [str(value).strip()]


def normalize_tags(value: Any) -> list[str]:
    """Tags and genres: trimmed, case-preserving, first occurrence wins."""
    seen: set[str] = set()
    result: list[str] = []
    for tag in normalize_string_list(value, split_commas=True):
        key = tag.lower()
        if key not in seen:
            seen.add(key)
            result.append(tag)
    return result


def normalize_page_order(value: Any) -> list[str]:
    return normalize_string_list(value)


def parse_contributor_groups(
    value: Any,
) -> tuple[list[ContributorGroup], list[LifecycleError]]:
    """
    Turn raw contributor rows into ContributorGroup values.

    Rows with neither role nor names are dropped. A row that names people
    but has no role is reported as CONTRIBUTOR_ROLE_MISSING.
    """
    if value is None:
        return [], []
    if isinstance(value, str):
        value = _decode_json_text(value)
        if isinstance(value, str):
            return [], [
                LifecycleError(
                    kind=ErrorKind.CONTRIBUTOR_ROLE_MISSING,
                    message="Contributors must be a list of {role, names} objects",
                    field="contributors",
                )
            ]
    if isinstance(value, dict):
        value = [{"role": role, "names": names} for role, names in value.items()]
    if not isinstance(value, (list, tuple)):
        return [], [
            LifecycleError(
                kind=ErrorKind.CONTRIBUTOR_ROLE_MISSING,
                message="Contributors must be a list of {role, names} objects",
                field="contributors",
            )
        ]

    groups: list[ContributorGroup] = []
    errors: list[LifecycleError] = []

    for index, row in enumerate(value):
        if isinstance(row, ContributorGroup):
            row = row.model_dump()
        if not isinstance(row, dict):
            continue
        role = str(row.get("role") or "").strip()
        names = normalize_string_list(row.get("names"))
        if not role and not names:
            continue
        if not role:
            errors.append(
                LifecycleError(
                    kind=ErrorKind.CONTRIBUTOR_ROLE_MISSING,
                    message=f"Contributor row {index + 1} lists names but no role",
                    field=f"contributors[{index}].role",
                )
            )
            continue
        groups.append(ContributorGroup(role=role, names=names))

    return groups, errors


def coerce_bool(value: Any) -> bool | None:
    """Form fields arrive as text; JSON bodies as real booleans."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off", ""):
            return False
    if isinstance(value, int):
        return bool(value)
    raise ValueError(f"Cannot interpret {value!r} as a boolean")
