import unittest
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient
from pydantic import SecretStr

import main
from main import app


class MainTest(unittest.TestCase):

    client: TestClient

    def setUp(self):
        self.client = TestClient(app)

    def test_health(self):
        response = self.client.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")
        self.assertIn("version", response.json())

    @patch("api.auth.config")
    @patch.object(main, "di")
    def test_chat_update_hands_raw_body_to_webhook(self, mock_di: MagicMock, mock_auth_config: MagicMock):
        mock_auth_config.telegram_must_auth = False
        body = b'{"update_id": 1, "message": {"message_id": 1, "chat": {"id": 1, "type": "private"}, "date": 0}}'

        response = self.client.post("/telegram/chat-update", content = body)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})
        mock_di.update_dispatcher.run_webhook.assert_called_once_with(body)

    @patch("api.auth.config")
    @patch.object(main, "di")
    def test_chat_update_accepts_garbage_payloads(self, mock_di: MagicMock, mock_auth_config: MagicMock):
        mock_auth_config.telegram_must_auth = False

        response = self.client.post("/telegram/chat-update", content = b"not json")

        self.assertEqual(response.status_code, 200)
        mock_di.update_dispatcher.run_webhook.assert_called_once_with(b"not json")

    @patch("api.auth.config")
    @patch.object(main, "di")
    def test_chat_update_requires_secret_token(self, mock_di: MagicMock, mock_auth_config: MagicMock):
        mock_auth_config.telegram_must_auth = True
        mock_auth_config.telegram_auth_key = SecretStr("VALI-DKEY")

        rejected = self.client.post("/telegram/chat-update", content = b'{"update_id": 1}')
        accepted = self.client.post(
            "/telegram/chat-update",
            content = b'{"update_id": 1}',
            headers = {"X-Telegram-Bot-Api-Secret-Token": "VALI-DKEY"},
        )

        self.assertEqual(rejected.status_code, 403)
        self.assertEqual(accepted.status_code, 200)
        mock_di.update_dispatcher.run_webhook.assert_called_once_with(b'{"update_id": 1}')

    @patch.object(main, "signal")
    @patch.object(main, "di")
    def test_run_polling_installs_stop_handlers(self, mock_di: MagicMock, mock_signal: MagicMock):
        main.run_polling()

        mock_di.update_dispatcher.run_polling.assert_called_once_with()
        self.assertEqual(mock_signal.signal.call_count, 2)
        stop_handler = mock_signal.signal.call_args_list[0][0][1]
        stop_handler(15, None)
        mock_di.update_dispatcher.stop.assert_called_once_with()
