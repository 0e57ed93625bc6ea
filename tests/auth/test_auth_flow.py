import unittest
from unittest.mock import Mock, patch

from clinicdrive.auth import obtain_refresh_token
from clinicdrive.errors import AuthError, InvalidArgumentError


class TestObtainRefreshToken(unittest.TestCase):
    @patch("clinicdrive.auth.flow.InstalledAppFlow")
    def test_returns_refresh_token(self, flow_cls) -> None:
        flow = Mock()
        flow.run_local_server.return_value = Mock(refresh_token="rt-123")
        flow_cls.from_client_config.return_value = flow

        token = obtain_refresh_token("cid", "secret", port=8765)

        self.assertEqual(token, "rt-123")
        config = flow_cls.from_client_config.call_args.args[0]
        self.assertEqual(config["installed"]["client_id"], "cid")
        kwargs = flow.run_local_server.call_args.kwargs
        self.assertEqual(kwargs["port"], 8765)
        self.assertEqual(kwargs["access_type"], "offline")
        self.assertEqual(kwargs["prompt"], "consent")

    @patch("clinicdrive.auth.flow.InstalledAppFlow")
    def test_missing_refresh_token_is_auth_error(self, flow_cls) -> None:
        flow = Mock()
        flow.run_local_server.return_value = Mock(refresh_token=None)
        flow_cls.from_client_config.return_value = flow

        with self.assertRaises(AuthError):
            obtain_refresh_token("cid", "secret")

    @patch("clinicdrive.auth.flow.InstalledAppFlow")
    def test_flow_failure_is_auth_error(self, flow_cls) -> None:
        flow_cls.from_client_config.return_value.run_local_server.side_effect = RuntimeError("closed")

        with self.assertRaises(AuthError) as ctx:
            obtain_refresh_token("cid", "secret")
        self.assertIsInstance(ctx.exception.cause, RuntimeError)

    def test_requires_client_credentials(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            obtain_refresh_token("", "secret")
        with self.assertRaises(InvalidArgumentError):
            obtain_refresh_token("cid", "secret", scopes=[])


if __name__ == "__main__":
    unittest.main()
