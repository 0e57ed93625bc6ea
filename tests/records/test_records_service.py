import re
import unittest

from clinicdrive.errors import InvalidArgumentError, NotFoundError
from clinicdrive.models import FileRecord
from clinicdrive.records import RecordFile, RecordFileService
from drive_fakes import make_store

UUID_PNG = re.compile(r"^[0-9a-f-]{36}\.png$")


class TestRecordFile(unittest.TestCase):
    def test_original_file_name_fallbacks(self) -> None:
        with_prop = FileRecord(
            id="1",
            name="uuid.png",
            mime_type="image/png",
            description="desc.png",
            properties={"originalFileName": "orig.png"},
        )
        self.assertEqual(RecordFile.from_file_record(with_prop).original_file_name, "orig.png")

        with_desc = FileRecord(id="2", name="uuid.png", mime_type="image/png", description="desc.png")
        self.assertEqual(RecordFile.from_file_record(with_desc).original_file_name, "desc.png")

        bare = FileRecord(id="3", name="uuid.png", mime_type="image/png")
        rf = RecordFile.from_file_record(bare)
        self.assertEqual(rf.original_file_name, "uuid.png")
        self.assertEqual(rf.file_size, 0)
        self.assertIsNone(rf.record_id)


class TestRecordFileService(unittest.TestCase):
    def setUp(self) -> None:
        self.store, self.drive, _ = make_store(root_folder_id="ROOT")
        self.service = RecordFileService(self.store)

    def _upload(self, **overrides):
        kwargs = dict(
            original_file_name="panoramic.png",
            mime_type="image/png",
            record_id="rec-1",
            record_type="x-ray",
            patient_id="patient-1",
            patient_email="p1@example.com",
            uploaded_by="dentist-7",
            uploaded_by_name="Dr. Reyes",
        )
        kwargs.update(overrides)
        return self.service.upload(b"image-bytes", **kwargs)

    def test_upload_builds_folder_layout(self) -> None:
        rf = self._upload()

        data = self.drive.files_by_id[rf.id]
        type_folder = self.drive.files_by_id[data["parents"][0]]
        patient_folder = self.drive.files_by_id[type_folder["parents"][0]]

        self.assertEqual(type_folder["name"], "x-ray")
        self.assertEqual(patient_folder["name"], "patient-1")
        self.assertEqual(patient_folder["parents"], ["ROOT"])

    def test_upload_names_and_tags_file(self) -> None:
        rf = self._upload()

        self.assertRegex(rf.file_name, UUID_PNG)
        self.assertEqual(rf.original_file_name, "panoramic.png")
        self.assertEqual(rf.description, "panoramic.png")
        self.assertEqual(rf.file_type, "image/png")
        self.assertEqual(rf.file_size, len(b"image-bytes"))
        self.assertEqual(rf.record_id, "rec-1")
        self.assertEqual(rf.record_type, "x-ray")
        self.assertEqual(rf.patient_id, "patient-1")
        self.assertEqual(rf.patient_email, "p1@example.com")
        self.assertEqual(rf.uploaded_by_name, "Dr. Reyes")

        props = self.drive.files_by_id[rf.id]["properties"]
        self.assertRegex(props["uploadedAt"], r"^\d{4}-\d{2}-\d{2}T.*Z$")
        self.assertEqual(props["originalFileName"], "panoramic.png")

    def test_upload_omits_missing_optional_properties(self) -> None:
        rf = self._upload(patient_email=None, uploaded_by=None, uploaded_by_name=None)
        props = self.drive.files_by_id[rf.id]["properties"]
        self.assertNotIn("patientEmail", props)
        self.assertNotIn("uploadedBy", props)
        self.assertEqual(props["recordId"], "rec-1")

    def test_upload_guesses_missing_mime_type(self) -> None:
        rf = self._upload(original_file_name="report.pdf", mime_type=None)
        self.assertEqual(rf.file_type, "application/pdf")

    def test_upload_reuses_folders(self) -> None:
        self._upload()
        self._upload(original_file_name="second.png")
        self.assertEqual(len(self.drive.folders_named("patient-1")), 1)
        self.assertEqual(len(self.drive.folders_named("x-ray")), 1)

    def test_upload_requires_identifying_fields(self) -> None:
        for field in ("record_id", "record_type", "patient_id", "original_file_name"):
            with self.subTest(field=field):
                with self.assertRaises(InvalidArgumentError):
                    self._upload(**{field: ""})
        self.assertEqual(self.drive.files_by_id, {})

    def test_list_files_by_filters(self) -> None:
        a = self._upload()
        self._upload(record_id="rec-2", record_type="lab-result")
        self._upload(patient_id="patient-2", patient_email="p2@example.com")

        by_record = self.service.list_files(record_id="rec-1")
        self.assertEqual({f.patient_id for f in by_record}, {"patient-1", "patient-2"})

        both = self.service.list_files(record_id="rec-1", patient_id="patient-1")
        self.assertEqual([f.id for f in both], [a.id])

        labs = self.service.list_files(record_type="lab-result")
        self.assertEqual([f.record_id for f in labs], ["rec-2"])

    def test_list_files_without_filters_walks_root(self) -> None:
        self._upload()
        self._upload(patient_id="patient-2")
        files = self.service.list_files()
        self.assertEqual(len(files), 2)
        self.assertTrue(all(f.record_id == "rec-1" for f in files))

    def test_attach_to_record_keeps_other_properties(self) -> None:
        rf = self._upload(record_id="temp-1")

        updated = self.service.attach_to_record(rf.id, "rec-9")

        self.assertEqual(updated.record_id, "rec-9")
        self.assertEqual(updated.patient_id, "patient-1")
        self.assertEqual(updated.original_file_name, "panoramic.png")
        self.assertEqual(self.service.list_files(record_id="temp-1"), [])

    def test_attach_to_record_requires_ids(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            self.service.attach_to_record("", "rec-1")

    def test_download_and_delete(self) -> None:
        rf = self._upload()

        meta, content = self.service.download(rf.id)
        self.assertEqual(content, b"image-bytes")
        self.assertEqual(meta.original_file_name, "panoramic.png")

        self.service.delete(rf.id)
        with self.assertRaises(NotFoundError):
            self.service.download(rf.id)


if __name__ == "__main__":
    unittest.main()
