from .ids import new_uuid, unique_file_name
from .locks import KeyedLocks
from .mime import DEFAULT_MIME, FOLDER_MIME, file_extension, guess_mime_type, is_folder
from .time import ensure_utc, now_utc, parse_rfc3339, to_rfc3339

__all__ = [
    "new_uuid",
    "unique_file_name",
    "KeyedLocks",
    "FOLDER_MIME",
    "DEFAULT_MIME",
    "is_folder",
    "guess_mime_type",
    "file_extension",
    "now_utc",
    "parse_rfc3339",
    "to_rfc3339",
    "ensure_utc",
]
