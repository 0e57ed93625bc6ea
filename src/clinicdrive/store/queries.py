"""Builders for the Drive `q` search language."""

from __future__ import annotations

from typing import Mapping, Optional

from clinicdrive.util.mime import FOLDER_MIME


def quote(value: str) -> str:
    """Return value as a quoted Drive query literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def in_parents(parent_id: str) -> str:
    return f"{quote(parent_id)} in parents"


def has_property(key: str, value: str) -> str:
    return f"properties has {{ key={quote(key)} and value={quote(value)} }}"


def properties_query(properties: Mapping[str, str]) -> str:
    """Conjunction of property-equality clauses, in mapping order."""
    return " and ".join(has_property(k, v) for k, v in properties.items())


def folder_named(name: str) -> str:
    return f"mimeType={quote(FOLDER_MIME)} and name={quote(name)} and trashed=false"


def not_folder() -> str:
    return f"mimeType!={quote(FOLDER_MIME)} and trashed=false"


def combine(query: Optional[str], parent_id: Optional[str]) -> Optional[str]:
    """
    AND a caller query with a parent-folder constraint.

    Either part may be missing; returns None when both are.
    """
    if parent_id and query:
        return f"({query}) and {in_parents(parent_id)}"
    if parent_id:
        return in_parents(parent_id)
    return query or None
