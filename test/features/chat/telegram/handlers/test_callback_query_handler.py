import unittest
from unittest.mock import Mock

from features.chat.telegram.handlers.callback_query_handler import CallbackQueryHandler
from features.chat.telegram.handlers.decorators import on_callback_query
from features.chat.telegram.model.update import Update
from features.chat.telegram.sdk.telegram_bot_api import TelegramBotAPI


def callback_update(data: str | None) -> Update:
    query = {"id": "cb-1", "from": {"id": 42, "is_bot": False, "first_name": "Ann"}}
    if data is not None:
        query["data"] = data
    return Update.model_validate({"update_id": 1, "callback_query": query})


class CallbackQueryHandlerTest(unittest.TestCase):

    def test_exact_match(self):
        handler = CallbackQueryHandler("confirm")

        self.assertTrue(handler.supports(callback_update("confirm")))
        self.assertFalse(handler.supports(callback_update("confirm:1")))
        self.assertEqual(handler.payload(callback_update("confirm")), "confirm")

    def test_prefix_match(self):
        handler = CallbackQueryHandler("item:", prefix_match = True)

        self.assertTrue(handler.supports(callback_update("item:42")))
        self.assertTrue(handler.supports(callback_update("item:")))
        self.assertFalse(handler.supports(callback_update("items:42")))
        self.assertEqual(handler.payload(callback_update("item:42")), "42")

    def test_ignores_non_callback_updates(self):
        handler = CallbackQueryHandler("item:", prefix_match = True)
        message_update = Update.model_validate(
            {"update_id": 1, "message": {"message_id": 1, "chat": {"id": 1, "type": "private"}, "date": 0, "text": "item:1"}},
        )

        self.assertFalse(handler.supports(message_update))
        self.assertFalse(handler.supports(callback_update(None)))
        self.assertEqual(handler.payload(message_update), "")

    def test_names(self):
        self.assertEqual(CallbackQueryHandler("item:", prefix_match = True).name, "CallbackQueryHandler(item:*)")
        self.assertEqual(CallbackQueryHandler("ok").name, "CallbackQueryHandler(ok)")

    def test_decorator(self):
        payloads = []

        @on_callback_query("item:", prefix_match = True)
        def pick_item(update: Update, bot_api: TelegramBotAPI):
            payloads.append(pick_item.payload(update))

        update = callback_update("item:7")
        self.assertTrue(pick_item.supports(update))
        pick_item.handle(update, Mock(spec = TelegramBotAPI))
        self.assertEqual(payloads, ["7"])
        self.assertEqual(pick_item.name, "pick_item")
