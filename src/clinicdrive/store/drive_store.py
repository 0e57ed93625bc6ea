"""Google Drive file store used for medical-record attachments."""

from __future__ import annotations

import functools
import io
import json
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, Iterator, Mapping, Optional, Union

import httplib2
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload

from clinicdrive.auth import AccessTokenManager
from clinicdrive.config import DriveSettings
from clinicdrive.errors import (
    AuthError,
    ConfigError,
    DriveStoreError,
    HttpErrorInfo,
    InvalidArgumentError,
    NetworkError,
    RateLimitError,
    RemoteError,
    SharingError,
    map_http_error,
)
from clinicdrive.models import FilePage, FileRecord, UploadOptions
from clinicdrive.util.locks import KeyedLocks
from clinicdrive.util.mime import FOLDER_MIME
from clinicdrive.util.time import parse_rfc3339

from . import queries
from .fields import FILE_FIELDS, LIST_FIELDS

logger = logging.getLogger(__name__)

Content = Union[bytes, bytearray, memoryview, BinaryIO]

PERMISSION_ROLES: frozenset[str] = frozenset({"reader", "writer", "commenter"})
PERMISSION_TYPES: frozenset[str] = frozenset({"user", "group", "domain", "anyone"})

MAX_PAGE_SIZE: int = 1000


@dataclass(frozen=True)
class _RetryPolicy:
    max_retries: int = 0
    initial_delay_sec: float = 1.0


class DriveFileStore:
    """
    Authenticated CRUD and search over Google Drive.

    Notes:
        - The access token is owned by the injected AccessTokenManager and is
          attached to every request as a bearer header.
        - Each request runs on its own httplib2.Http, so one store can be
          shared across threads.
        - Folder get-or-create is serialized per (parent, name) in this
          process only; other processes can still create duplicates.
        - No retries unless max_retries > 0.
    """

    def __init__(
        self,
        tokens: AccessTokenManager,
        service: Any,
        *,
        root_folder_id: Optional[str] = None,
        share_uploads_publicly: bool = True,
        max_retries: int = 0,
        page_size: int = 100,
        http_factory: Callable[[], Any] = httplib2.Http,
    ) -> None:
        if max_retries < 0:
            raise InvalidArgumentError("max_retries must be >= 0")
        self._tokens = tokens
        self._service = service
        self._root_folder_id = root_folder_id or None
        self._share_uploads_publicly = share_uploads_publicly
        self._retry_policy = _RetryPolicy(max_retries=max_retries)
        self._page_size = _check_page_size(page_size)
        self._http_factory = http_factory
        self._folder_locks = KeyedLocks()

    @classmethod
    def from_settings(cls, settings: Optional[DriveSettings] = None) -> "DriveFileStore":
        """Build a store (token manager + Drive service) from environment settings."""
        settings = settings if settings is not None else DriveSettings()
        tokens = AccessTokenManager.from_credentials(settings.to_credentials())
        http_factory = functools.partial(httplib2.Http, timeout=settings.http_timeout)

        try:
            service = build("drive", "v3", http=http_factory(), cache_discovery=False)
        except Exception as exc:
            raise ConfigError("Failed to build Drive service", cause=exc) from exc

        return cls(
            tokens,
            service,
            root_folder_id=settings.root_folder or None,
            share_uploads_publicly=settings.share_uploads_publicly,
            max_retries=settings.max_retries,
            page_size=settings.page_size,
            http_factory=http_factory,
        )

    @property
    def root_folder_id(self) -> Optional[str]:
        return self._root_folder_id

    def get_access_token(self) -> str:
        """Return a currently valid access token (refreshing when needed)."""
        return self._tokens.get_access_token()

    # ----------------------------
    # Files and folders
    # ----------------------------
    def create_folder(self, name: str, parent_id: Optional[str] = None) -> str:
        """Create a folder under parent_id (Drive root when omitted); return its id."""
        _require_name(name, "name")
        body: dict[str, Any] = {"name": name, "mimeType": FOLDER_MIME}
        if parent_id:
            body["parents"] = [parent_id]

        req = self._service.files().create(body=body, fields="id")
        data = self._execute(req)
        logger.info("Created folder %r under %s", name, parent_id or "root")
        return data["id"]

    def upload_file(self, content: Content, options: UploadOptions) -> FileRecord:
        """
        Upload content as a multipart request and return the created file.

        When public sharing is enabled the file then gets an anyone/reader
        permission. If that step fails the file is deleted again and
        SharingError is raised; details["rolled_back"] is False when the
        delete failed too.
        """
        _require_name(options.file_name, "file_name")
        _require_name(options.mime_type, "mime_type")

        body: dict[str, Any] = {"name": options.file_name, "mimeType": options.mime_type}
        if options.folder_id:
            body["parents"] = [options.folder_id]
        if options.description:
            body["description"] = options.description
        if options.metadata:
            body["properties"] = _string_properties(options.metadata)

        if isinstance(content, (bytes, bytearray, memoryview)):
            stream: BinaryIO = io.BytesIO(bytes(content))
        else:
            stream = content
        media = MediaIoBaseUpload(stream, mimetype=options.mime_type, resumable=False)

        req = self._service.files().create(body=body, media_body=media, fields=FILE_FIELDS)
        record = _file_dict_to_record(self._execute(req))
        logger.info("Uploaded %s (%s) into %s", record.id, record.name, options.folder_id or "root")

        if self._share_uploads_publicly:
            self._share_or_roll_back(record.id)
        return record

    def set_file_permissions(
        self,
        file_id: str,
        role: str,
        type: str,
        email_address: Optional[str] = None,
    ) -> None:
        """Grant role to a user/group/domain/anyone on file_id."""
        if role not in PERMISSION_ROLES:
            raise InvalidArgumentError("Unsupported permission role", details={"role": role})
        if type not in PERMISSION_TYPES:
            raise InvalidArgumentError("Unsupported permission type", details={"type": type})
        if type in ("user", "group") and not email_address:
            raise InvalidArgumentError(
                "email_address is required for user/group permissions",
                details={"type": type},
            )

        body: dict[str, Any] = {"type": type, "role": role}
        if email_address and type in ("user", "group"):
            body["emailAddress"] = email_address

        req = self._service.permissions().create(fileId=file_id, body=body, fields="id")
        self._execute(req)

    def set_folder_permissions_for_user(
        self,
        folder_id: str,
        user_email: str,
        role: str = "reader",
    ) -> None:
        if role not in ("reader", "writer"):
            raise InvalidArgumentError("Folder role must be reader or writer", details={"role": role})
        self.set_file_permissions(folder_id, role, "user", user_email)

    def download_file(self, file_id: str) -> bytes:
        """Return the raw content of file_id. Raises NotFoundError if it is gone."""
        req = self._service.files().get_media(fileId=file_id)
        data = self._execute(req)
        if isinstance(data, str):
            return data.encode("utf-8")
        return bytes(data)

    def delete_file(self, file_id: str) -> None:
        """Permanently delete file_id (no trash)."""
        req = self._service.files().delete(fileId=file_id)
        self._execute(req)
        logger.info("Deleted %s", file_id)

    def get_file_metadata(self, file_id: str) -> FileRecord:
        req = self._service.files().get(fileId=file_id, fields=FILE_FIELDS)
        return _file_dict_to_record(self._execute(req))

    def update_file_metadata(self, file_id: str, properties: Mapping[str, Any]) -> FileRecord:
        """
        Replace the properties of file_id with exactly `properties`.

        Drive merges property patches, so keys missing from `properties` are
        sent as null to remove them. Callers wanting a partial update must
        read, merge and pass the full map.
        """
        new_props = _string_properties(properties)

        current_req = self._service.files().get(fileId=file_id, fields="properties")
        current = self._execute(current_req).get("properties") or {}

        patch: dict[str, Optional[str]] = {k: None for k in current if k not in new_props}
        patch.update(new_props)

        req = self._service.files().update(
            fileId=file_id,
            body={"properties": patch},
            fields=FILE_FIELDS,
        )
        return _file_dict_to_record(self._execute(req))

    # ----------------------------
    # Listing and search
    # ----------------------------
    def list_files(
        self,
        *,
        folder_id: Optional[str] = None,
        query: Optional[str] = None,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> FilePage:
        """
        Return one page of files.

        query and the folder_id parent constraint are combined with AND.
        Pass FilePage.next_page_token back as page_token for the next page.
        """
        size = _check_page_size(page_size) if page_size is not None else self._page_size
        q = queries.combine(query, folder_id)

        kwargs: dict[str, Any] = {"fields": LIST_FIELDS, "pageSize": size}
        if q:
            kwargs["q"] = q
        if page_token:
            kwargs["pageToken"] = page_token

        logger.debug("files.list q=%s pageToken=%s", q, page_token)
        data = self._execute(self._service.files().list(**kwargs))
        files = [_file_dict_to_record(f) for f in data.get("files", [])]
        return FilePage(files=files, next_page_token=data.get("nextPageToken") or None)

    def iter_files(
        self,
        *,
        folder_id: Optional[str] = None,
        query: Optional[str] = None,
    ) -> Iterator[FileRecord]:
        """Yield every file matching the query, following page tokens."""
        page_token: Optional[str] = None
        while True:
            page = self.list_files(folder_id=folder_id, query=query, page_token=page_token)
            yield from page.files
            page_token = page.next_page_token
            if not page_token:
                break

    def list_tree(self, root_id: str) -> list[FileRecord]:
        """
        Recursively list all non-trashed items under root_id (BFS).

        Returns:
            All descendants under root_id (root itself is not included).
        """
        results: list[FileRecord] = []
        queue: deque[str] = deque([root_id])
        seen_folders: set[str] = set()

        while queue:
            parent_id = queue.popleft()
            if parent_id in seen_folders:
                continue
            seen_folders.add(parent_id)

            children = list(self.iter_files(folder_id=parent_id, query="trashed=false"))
            results.extend(children)
            queue.extend(child.id for child in children if child.is_folder)

        return results

    def search_by_metadata(self, metadata: Mapping[str, Any]) -> list[FileRecord]:
        """
        Return non-trashed files whose properties contain every key=value pair.

        Result order is whatever Drive returns.
        """
        props = _string_properties(metadata)
        if not props:
            raise InvalidArgumentError("metadata must contain at least one key/value pair")

        q = f"{queries.properties_query(props)} and trashed=false"
        return list(self.iter_files(query=q))

    # ----------------------------
    # Folder layout: root / <patient id> / <record type>
    # ----------------------------
    def get_or_create_patient_folder(self, patient_id: str, root_id: Optional[str] = None) -> str:
        """Return the folder named patient_id under root_id (default: configured root)."""
        return self.get_or_create_folder(patient_id, root_id or self._root_folder_id)

    def get_or_create_record_type_folder(self, record_type: str, parent_id: str) -> str:
        """Return the folder named record_type under a patient folder."""
        if not parent_id:
            raise InvalidArgumentError("parent_id is required")
        return self.get_or_create_folder(record_type, parent_id)

    def get_or_create_folder(self, name: str, parent_id: Optional[str]) -> str:
        _require_name(name, "name")
        with self._folder_locks.hold((parent_id or "", name)):
            page = self.list_files(
                folder_id=parent_id,
                query=queries.folder_named(name),
                page_size=1,
            )
            if page.files:
                return page.files[0].id
            return self.create_folder(name, parent_id)

    # ----------------------------
    # Internals
    # ----------------------------
    def _share_or_roll_back(self, file_id: str) -> None:
        try:
            self.set_file_permissions(file_id, "reader", "anyone")
            return
        except DriveStoreError as exc:
            share_error = exc

        rolled_back = True
        try:
            self.delete_file(file_id)
        except DriveStoreError as exc:
            rolled_back = False
            logger.warning("Could not delete %s after failed sharing: %s", file_id, exc)
        else:
            logger.warning("Deleted %s after failed sharing: %s", file_id, share_error)

        details: dict[str, Any] = {"file_id": file_id, "rolled_back": rolled_back}
        if isinstance(share_error, RemoteError):
            details["status_code"] = share_error.status_code
            details["reason"] = share_error.reason
        raise SharingError(
            f"Uploaded file could not be shared: {share_error}",
            details=details,
            cause=share_error,
        ) from share_error

    def _execute(self, request: Any) -> Any:
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(self._retry_policy.max_retries + 1):
            token = self._tokens.get_access_token()
            request.headers["authorization"] = f"Bearer {token}"
            try:
                return request.execute(http=self._http_factory())
            except Exception as exc:
                mapped = self._map_exception(exc)
                if isinstance(mapped, AuthError):
                    # Drive refused the bearer token; fetch a new one next time.
                    self._tokens.invalidate()
                if self._should_retry(mapped) and attempt < self._retry_policy.max_retries:
                    logger.debug("Retrying after %s (attempt %d)", type(mapped).__name__, attempt + 1)
                    time.sleep(delay)
                    delay *= 2
                    continue
                raise mapped from exc

        raise RemoteError("Unexpected retry loop termination")

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, (RateLimitError, NetworkError)):
            return True
        if type(exc) is RemoteError:
            return 500 <= exc.status_code <= 599
        return False

    def _map_exception(self, exc: Exception) -> DriveStoreError:
        if isinstance(exc, HttpError):
            info = _http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        if isinstance(exc, (httplib2.HttpLib2Error, OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return RemoteError("Drive API error", cause=exc)


def _check_page_size(page_size: int) -> int:
    if not isinstance(page_size, int) or not 1 <= page_size <= MAX_PAGE_SIZE:
        raise InvalidArgumentError(
            f"page_size must be between 1 and {MAX_PAGE_SIZE}",
            details={"page_size": page_size},
        )
    return page_size


def _require_name(value: Optional[str], field_name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"{field_name} must be a non-empty string")


def _string_properties(properties: Mapping[str, Any]) -> dict[str, str]:
    """Drive stores property values as strings; None values are dropped."""
    return {str(k): str(v) for k, v in properties.items() if v is not None}


def _file_dict_to_record(data: dict[str, Any]) -> FileRecord:
    def _str(key: str) -> Optional[str]:
        value = data.get(key)
        return value if isinstance(value, str) and value else None

    def _time(key: str):
        value = data.get(key)
        if not isinstance(value, str):
            return None
        try:
            return parse_rfc3339(value)
        except ValueError:
            return None

    size = None
    if isinstance(data.get("size"), str) and data["size"].isdigit():
        size = int(data["size"])
    elif isinstance(data.get("size"), int):
        size = data["size"]

    props = data.get("properties") or {}
    if not isinstance(props, dict):
        props = {}
    parents = data.get("parents") or []

    return FileRecord(
        id=data.get("id") or "",
        name=data.get("name") or "",
        mime_type=data.get("mimeType") or "",
        size=size,
        created_time=_time("createdTime"),
        modified_time=_time("modifiedTime"),
        web_view_link=_str("webViewLink"),
        web_content_link=_str("webContentLink"),
        thumbnail_link=_str("thumbnailLink"),
        description=_str("description"),
        properties=_string_properties(props),
        parents=list(parents) if isinstance(parents, list) else [],
    )


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = None
        err = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = int(status_code) if isinstance(status_code, str) and status_code.isdigit() else 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
