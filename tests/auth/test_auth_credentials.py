import unittest

from clinicdrive.auth import DEFAULT_SCOPES, GOOGLE_TOKEN_URI, DriveCredentials
from clinicdrive.errors import ConfigError


class TestDriveCredentials(unittest.TestCase):
    def test_defaults(self) -> None:
        creds = DriveCredentials(client_id="cid", client_secret="secret", refresh_token="rt")
        self.assertEqual(creds.token_uri, GOOGLE_TOKEN_URI)
        self.assertEqual(creds.scopes, DEFAULT_SCOPES)
        self.assertEqual(creds.redirect_uri, "")

    def test_rejects_empty_required_values(self) -> None:
        for field in ("client_id", "client_secret", "refresh_token"):
            values = {"client_id": "cid", "client_secret": "secret", "refresh_token": "rt"}
            values[field] = "  "
            with self.subTest(field=field):
                with self.assertRaises(ConfigError):
                    DriveCredentials(**values)

    def test_rejects_empty_scopes(self) -> None:
        with self.assertRaises(ConfigError):
            DriveCredentials(client_id="cid", client_secret="s", refresh_token="rt", scopes=())

    def test_is_immutable(self) -> None:
        creds = DriveCredentials(client_id="cid", client_secret="s", refresh_token="rt")
        with self.assertRaises(Exception):
            creds.client_id = "other"  # type: ignore[misc]

    def test_repr_hides_secrets(self) -> None:
        creds = DriveCredentials(client_id="cid", client_secret="s3cr3t", refresh_token="rt-value")
        text = repr(creds)
        self.assertNotIn("s3cr3t", text)
        self.assertNotIn("rt-value", text)
        self.assertIn("cid", text)


if __name__ == "__main__":
    unittest.main()
