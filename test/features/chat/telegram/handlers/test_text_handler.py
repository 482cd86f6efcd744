import re
import unittest
from unittest.mock import Mock

from features.chat.telegram.handlers.decorators import on_any_text, on_regex, on_text
from features.chat.telegram.handlers.text_handler import TextHandler
from features.chat.telegram.model.update import Update
from features.chat.telegram.sdk.telegram_bot_api import TelegramBotAPI


def text_update(text: str | None) -> Update:
    message = {"message_id": 1, "chat": {"id": 555, "type": "private"}, "date": 0}
    if text is not None:
        message["text"] = text
    return Update.model_validate({"update_id": 1, "message": message})


class TextHandlerTest(unittest.TestCase):

    def test_any_mode_matches_every_text(self):
        handler = TextHandler()

        self.assertTrue(handler.supports(text_update("anything")))
        self.assertTrue(handler.supports(text_update("")))
        self.assertFalse(handler.supports(text_update(None)))
        self.assertFalse(handler.supports(Update.model_validate({"update_id": 1})))

    def test_exact_mode(self):
        handler = TextHandler(TextHandler.Mode.exact, "ping")

        self.assertTrue(handler.supports(text_update("ping")))
        self.assertFalse(handler.supports(text_update("ping!")))
        self.assertFalse(handler.supports(text_update("Ping")))

    def test_regex_mode_searches_the_text(self):
        handler = TextHandler(TextHandler.Mode.regex, r"order #(\d+)")

        self.assertTrue(handler.supports(text_update("where is order #42?")))
        self.assertFalse(handler.supports(text_update("where is my order?")))

    def test_regex_captures(self):
        handler = TextHandler(TextHandler.Mode.regex, r"(?P<item>\w+) x(?P<count>\d+)")

        match = handler.match(text_update("apple x3"))

        self.assertEqual(match.group("item"), "apple")
        self.assertEqual(match.group("count"), "3")
        self.assertIsNone(handler.match(text_update("nothing here")))

    def test_regex_flags(self):
        handler = TextHandler(TextHandler.Mode.regex, r"^hello", flags = re.IGNORECASE)

        self.assertTrue(handler.supports(text_update("HELLO there")))

    def test_match_is_none_outside_regex_mode(self):
        self.assertIsNone(TextHandler().match(text_update("hi")))
        self.assertIsNone(TextHandler(TextHandler.Mode.exact, "hi").match(text_update("hi")))

    def test_modes_need_text(self):
        with self.assertRaises(ValueError):
            TextHandler(TextHandler.Mode.exact)
        with self.assertRaises(ValueError):
            TextHandler(TextHandler.Mode.regex)

    def test_names(self):
        self.assertEqual(TextHandler().name, "TextHandler(any)")
        self.assertEqual(TextHandler(TextHandler.Mode.exact, "ping").name, "TextHandler(exact: ping)")

    def test_decorators(self):
        bot_api = Mock(spec = TelegramBotAPI)
        seen = []

        @on_text("ping")
        def ping(update: Update, api: TelegramBotAPI):
            seen.append("ping")

        @on_regex(r"(\d+)")
        def number(update: Update, api: TelegramBotAPI):
            seen.append(number.match(update).group(1))

        @on_any_text
        def anything(update: Update, api: TelegramBotAPI):
            seen.append("any")

        self.assertEqual(ping.mode, TextHandler.Mode.exact)
        self.assertEqual(number.mode, TextHandler.Mode.regex)
        self.assertEqual(anything.mode, TextHandler.Mode.any)
        ping.handle(text_update("ping"), bot_api)
        number.handle(text_update("take 7"), bot_api)
        anything.handle(text_update("x"), bot_api)
        self.assertEqual(seen, ["ping", "7", "any"])
        self.assertEqual(anything.name, "anything")
