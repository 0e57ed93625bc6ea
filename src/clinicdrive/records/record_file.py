"""Record-attachment view of a Drive file."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from clinicdrive.models import FileRecord

# Property keys written on every upload.
RECORD_ID = "recordId"
RECORD_TYPE = "recordType"
PATIENT_ID = "patientId"
PATIENT_EMAIL = "patientEmail"
UPLOADED_BY = "uploadedBy"
UPLOADED_BY_NAME = "uploadedByName"
UPLOADED_AT = "uploadedAt"
ORIGINAL_FILE_NAME = "originalFileName"


@dataclass(slots=True)
class RecordFile:
    """A file attached to a patient's medical record."""

    id: str
    file_name: str
    original_file_name: str
    file_type: str
    file_size: int

    record_id: Optional[str] = None
    record_type: Optional[str] = None
    patient_id: Optional[str] = None
    patient_email: Optional[str] = None
    uploaded_by: Optional[str] = None
    uploaded_by_name: Optional[str] = None
    description: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    modified_time: Optional[datetime] = None
    web_view_link: Optional[str] = None
    web_content_link: Optional[str] = None
    thumbnail_link: Optional[str] = None

    @classmethod
    def from_file_record(cls, record: FileRecord) -> "RecordFile":
        props = record.properties
        return cls(
            id=record.id,
            file_name=record.name,
            original_file_name=props.get(ORIGINAL_FILE_NAME) or record.description or record.name,
            file_type=record.mime_type,
            file_size=record.size or 0,
            record_id=props.get(RECORD_ID),
            record_type=props.get(RECORD_TYPE),
            patient_id=props.get(PATIENT_ID),
            patient_email=props.get(PATIENT_EMAIL),
            uploaded_by=props.get(UPLOADED_BY),
            uploaded_by_name=props.get(UPLOADED_BY_NAME),
            description=record.description,
            uploaded_at=record.created_time,
            modified_time=record.modified_time,
            web_view_link=record.web_view_link,
            web_content_link=record.web_content_link,
            thumbnail_link=record.thumbnail_link,
        )
