import re
import unittest

from clinicdrive.util.ids import new_uuid, unique_file_name

UUID_RE = r"[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}"


class TestUtilIds(unittest.TestCase):
    def test_new_uuid_is_uuid4(self) -> None:
        self.assertRegex(new_uuid(), "^" + UUID_RE + "$")

    def test_unique_file_name_keeps_extension(self) -> None:
        name = unique_file_name("panoramic x-ray.jpeg")
        self.assertRegex(name, "^" + UUID_RE + r"\.jpeg$")

    def test_unique_file_name_without_extension(self) -> None:
        self.assertRegex(unique_file_name("notes"), "^" + UUID_RE + "$")

    def test_unique_file_name_differs_per_call(self) -> None:
        self.assertNotEqual(unique_file_name("a.pdf"), unique_file_name("a.pdf"))


if __name__ == "__main__":
    unittest.main()
