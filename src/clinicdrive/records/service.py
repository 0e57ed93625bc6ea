"""Medical-record attachments stored through DriveFileStore."""

from __future__ import annotations

import logging
from typing import Optional

from clinicdrive.errors import InvalidArgumentError
from clinicdrive.models import UploadOptions
from clinicdrive.store import DriveFileStore
from clinicdrive.store import queries
from clinicdrive.util.ids import unique_file_name
from clinicdrive.util.mime import guess_mime_type
from clinicdrive.util.time import now_utc, to_rfc3339

from . import record_file as keys
from .record_file import RecordFile

logger = logging.getLogger(__name__)


class RecordFileService:
    """
    Upload, find and re-assign record attachments.

    Layout: <root>/<patient id>/<record type>/<uuid>.<ext>. Each file carries
    recordId/recordType/patientId (and uploader) properties, which are the
    only index used to find it again.
    """

    def __init__(self, store: DriveFileStore, root_folder_id: Optional[str] = None) -> None:
        self._store = store
        self._root_folder_id = root_folder_id or store.root_folder_id

    def upload(
        self,
        content: bytes,
        *,
        original_file_name: str,
        mime_type: Optional[str],
        record_id: str,
        record_type: str,
        patient_id: str,
        patient_email: Optional[str] = None,
        uploaded_by: Optional[str] = None,
        uploaded_by_name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> RecordFile:
        if not original_file_name:
            raise InvalidArgumentError("original_file_name is required")
        if not record_id or not record_type or not patient_id:
            raise InvalidArgumentError(
                "record_id, record_type and patient_id are required",
                details={
                    "record_id": record_id,
                    "record_type": record_type,
                    "patient_id": patient_id,
                },
            )

        patient_folder = self._store.get_or_create_patient_folder(patient_id, self._root_folder_id)
        type_folder = self._store.get_or_create_record_type_folder(record_type, patient_folder)

        metadata = {
            keys.RECORD_ID: record_id,
            keys.RECORD_TYPE: record_type,
            keys.PATIENT_ID: patient_id,
            keys.PATIENT_EMAIL: patient_email,
            keys.UPLOADED_BY: uploaded_by,
            keys.UPLOADED_BY_NAME: uploaded_by_name,
            keys.UPLOADED_AT: to_rfc3339(now_utc()),
            keys.ORIGINAL_FILE_NAME: original_file_name,
        }
        options = UploadOptions(
            file_name=unique_file_name(original_file_name),
            mime_type=mime_type or guess_mime_type(original_file_name),
            folder_id=type_folder,
            description=description or original_file_name,
            metadata={k: v for k, v in metadata.items() if v is not None},
        )

        record = self._store.upload_file(content, options)
        logger.info(
            "Stored %s for patient %s (%s) as %s",
            original_file_name,
            patient_id,
            record_type,
            record.id,
        )
        return RecordFile.from_file_record(record)

    def list_files(
        self,
        *,
        patient_id: Optional[str] = None,
        patient_email: Optional[str] = None,
        record_id: Optional[str] = None,
        record_type: Optional[str] = None,
    ) -> list[RecordFile]:
        """
        Find attachments by any combination of filters.

        Without filters every file below the root folder is returned.
        """
        filters = {
            keys.PATIENT_ID: patient_id,
            keys.PATIENT_EMAIL: patient_email,
            keys.RECORD_ID: record_id,
            keys.RECORD_TYPE: record_type,
        }
        filters = {k: v for k, v in filters.items() if v}
        logger.debug("Listing record files with filters %s", filters)

        if filters:
            records = self._store.search_by_metadata(filters)
        elif self._root_folder_id:
            records = [r for r in self._store.list_tree(self._root_folder_id) if not r.is_folder]
        else:
            records = list(self._store.iter_files(query=queries.not_folder()))

        return [RecordFile.from_file_record(r) for r in records]

    def attach_to_record(self, file_id: str, record_id: str) -> RecordFile:
        """Point file_id at record_id, keeping its other properties."""
        if not file_id or not record_id:
            raise InvalidArgumentError("file_id and record_id are required")

        current = self._store.get_file_metadata(file_id)
        properties = dict(current.properties)
        properties[keys.RECORD_ID] = record_id
        updated = self._store.update_file_metadata(file_id, properties)
        logger.info("Attached %s to record %s", file_id, record_id)
        return RecordFile.from_file_record(updated)

    def download(self, file_id: str) -> tuple[RecordFile, bytes]:
        """Return the attachment's metadata and content."""
        record = self._store.get_file_metadata(file_id)
        content = self._store.download_file(file_id)
        return RecordFile.from_file_record(record), content

    def delete(self, file_id: str) -> None:
        self._store.delete_file(file_id)
