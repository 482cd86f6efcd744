from typing import Any

import requests
from pydantic import SecretStr
from requests import RequestException, Response

from features.chat.telegram.model.keyboard.inline_keyboard_markup import InlineKeyboardMarkup
from features.chat.telegram.model.keyboard.reply_keyboard_markup import ReplyKeyboardMarkup
from features.chat.telegram.model.message import Message
from features.chat.telegram.model.user import User
from features.chat.telegram.telegram_errors import RemoteApiError
from util import log
from util.config import config
from util.error_codes import INVALID_API_RESPONSE
from util.errors import ExternalServiceError

ReplyMarkup = InlineKeyboardMarkup | ReplyKeyboardMarkup


class TelegramBotAPI:
    """https://core.telegram.org/bots/api"""
    __bot_api_url: str
    __timeout_s: int

    def __init__(
        self,
        token: SecretStr | None = None,
        api_base_url: str | None = None,
        timeout_s: int | None = None,
    ):
        token = token or config.telegram_bot_token
        api_base_url = api_base_url or config.telegram_api_base_url
        # never log this URL, it embeds the bot token
        self.__bot_api_url = f"{api_base_url}/bot{token.get_secret_value()}"
        self.__timeout_s = timeout_s or config.web_timeout_s

    def call(self, method: str, params: dict[str, Any] | None = None, timeout_s: int | None = None) -> dict[str, Any]:
        """
        Sends one Bot API method and returns the decoded response envelope.

        The envelope is returned even when it reports `ok: false`; use `send` to have that raised.

        Raises:
            ExternalServiceError: when the response body is not a JSON object.
            RequestException: when the request itself fails (network, timeout).
        """
        log.t(f"Calling Bot API method '{method}'")
        response = requests.post(
            f"{self.__bot_api_url}/{method}",
            json = params or {},
            timeout = timeout_s or self.__timeout_s,
        )
        return self.__decode_envelope(method, response)

    def send(self, method: str, params: dict[str, Any] | None = None) -> Any:
        envelope = self.call(method, params)
        if not envelope.get("ok"):
            error = RemoteApiError.from_response(envelope)
            log.e(f"Bot API method '{method}' was rejected", api_error_code = error.api_error_code)
            raise error
        return envelope.get("result")

    def get_me(self) -> User:
        return User.model_validate(self.send("getMe"))

    def send_text_message(
        self,
        chat_id: int | str,
        text: str,
        parse_mode: str | None = None,
        reply_markup: ReplyMarkup | None = None,
        reply_to_message_id: int | None = None,
        disable_web_page_preview: bool | None = None,
        disable_notification: bool | None = None,
    ) -> Message:
        log.t(f"Sending message to chat #{chat_id}")
        payload = self.__compact({
            "chat_id": chat_id,
            "text": text,
            "parse_mode": parse_mode,
            "reply_markup": reply_markup.to_api_dict() if reply_markup else None,
            "reply_to_message_id": reply_to_message_id,
            "disable_web_page_preview": disable_web_page_preview,
            "disable_notification": disable_notification,
        })
        return Message.model_validate(self.send("sendMessage", payload))

    def send_photo(
        self,
        chat_id: int | str,
        photo: str,
        caption: str | None = None,
        parse_mode: str | None = None,
        reply_markup: ReplyMarkup | None = None,
        reply_to_message_id: int | None = None,
        disable_notification: bool | None = None,
        has_spoiler: bool | None = None,
    ) -> Message:
        log.t(f"Sending photo to chat #{chat_id}")
        payload = self.__compact({
            "chat_id": chat_id,
            "photo": photo,
            "caption": caption,
            "parse_mode": parse_mode,
            "reply_markup": reply_markup.to_api_dict() if reply_markup else None,
            "reply_to_message_id": reply_to_message_id,
            "disable_notification": disable_notification,
            "has_spoiler": has_spoiler,
        })
        return Message.model_validate(self.send("sendPhoto", payload))

    def send_document(
        self,
        chat_id: int | str,
        document: str,
        caption: str | None = None,
        parse_mode: str | None = None,
        reply_markup: ReplyMarkup | None = None,
        reply_to_message_id: int | None = None,
        disable_notification: bool | None = None,
    ) -> Message:
        log.t(f"Sending document to chat #{chat_id}")
        payload = self.__compact({
            "chat_id": chat_id,
            "document": document,
            "caption": caption,
            "parse_mode": parse_mode,
            "reply_markup": reply_markup.to_api_dict() if reply_markup else None,
            "reply_to_message_id": reply_to_message_id,
            "disable_notification": disable_notification,
        })
        return Message.model_validate(self.send("sendDocument", payload))

    def edit_message_text(
        self,
        text: str,
        chat_id: int | str | None = None,
        message_id: int | None = None,
        inline_message_id: str | None = None,
        parse_mode: str | None = None,
        reply_markup: InlineKeyboardMarkup | None = None,
        disable_web_page_preview: bool | None = None,
    ) -> Message | bool:
        log.t(f"Editing message #{message_id or inline_message_id}")
        payload = self.__compact({
            "text": text,
            "chat_id": chat_id,
            "message_id": message_id,
            "inline_message_id": inline_message_id,
            "parse_mode": parse_mode,
            "reply_markup": reply_markup.to_api_dict() if reply_markup else None,
            "disable_web_page_preview": disable_web_page_preview,
        })
        result = self.send("editMessageText", payload)
        # inline messages are edited without echoing the message back
        return Message.model_validate(result) if isinstance(result, dict) else bool(result)

    def delete_message(self, chat_id: int | str, message_id: int) -> bool:
        log.t(f"Deleting message #{message_id} from chat #{chat_id}")
        return bool(self.send("deleteMessage", {"chat_id": chat_id, "message_id": message_id}))

    def answer_callback_query(
        self,
        callback_query_id: str,
        text: str | None = None,
        show_alert: bool | None = None,
        url: str | None = None,
        cache_time: int | None = None,
    ) -> bool:
        log.t(f"Answering callback query #{callback_query_id}")
        payload = self.__compact({
            "callback_query_id": callback_query_id,
            "text": text,
            "show_alert": show_alert,
            "url": url,
            "cache_time": cache_time,
        })
        return bool(self.send("answerCallbackQuery", payload))

    @staticmethod
    def __compact(payload: dict[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in payload.items() if value is not None}

    @staticmethod
    def __decode_envelope(method: str, response: Response | None) -> dict[str, Any]:
        if response is None:
            raise RequestException(log.e(f"No API response received for '{method}'"))
        try:
            envelope = response.json()
        except ValueError as e:
            message = log.e(f"Bot API method '{method}' returned a non-JSON body", http_status = response.status_code)
            raise ExternalServiceError(message, INVALID_API_RESPONSE) from e
        if not isinstance(envelope, dict) or "ok" not in envelope:
            message = log.e(f"Bot API method '{method}' returned an unexpected envelope", http_status = response.status_code)
            raise ExternalServiceError(message, INVALID_API_RESPONSE)
        if response.status_code != 200 and envelope.get("ok"):
            log.w(f"Bot API method '{method}' reported success with HTTP_{response.status_code}")
        return envelope
