from __future__ import annotations

import uuid

from .mime import file_extension


def new_uuid() -> str:
    """Generate a UUID4 string."""
    return str(uuid.uuid4())


def unique_file_name(original_name: str) -> str:
    """Return "<uuid4>.<ext>" keeping the extension of original_name."""
    ext = file_extension(original_name)
    if not ext:
        return new_uuid()
    return f"{new_uuid()}.{ext}"
