import unittest

import clinicdrive


class TestPublicApi(unittest.TestCase):
    def test_top_level_exports_exist(self) -> None:
        self.assertTrue(hasattr(clinicdrive, "DriveFileStore"))
        self.assertTrue(hasattr(clinicdrive, "RecordFileService"))
        self.assertTrue(hasattr(clinicdrive, "DriveSettings"))
        self.assertTrue(hasattr(clinicdrive, "AccessTokenManager"))
        self.assertTrue(hasattr(clinicdrive, "obtain_refresh_token"))

        self.assertTrue(hasattr(clinicdrive, "FileRecord"))
        self.assertTrue(hasattr(clinicdrive, "UploadOptions"))
        self.assertTrue(hasattr(clinicdrive, "RecordFile"))

        self.assertTrue(hasattr(clinicdrive, "DriveStoreError"))
        self.assertTrue(hasattr(clinicdrive, "NotFoundError"))
        self.assertTrue(hasattr(clinicdrive, "SharingError"))

    def test___all___is_defined(self) -> None:
        self.assertTrue(hasattr(clinicdrive, "__all__"))
        self.assertIn("DriveFileStore", clinicdrive.__all__)
        self.assertIn("DriveStoreError", clinicdrive.__all__)
        for name in clinicdrive.__all__:
            self.assertTrue(hasattr(clinicdrive, name), name)


if __name__ == "__main__":
    unittest.main()
