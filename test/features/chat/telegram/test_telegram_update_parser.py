import unittest

from features.chat.telegram.model.update import Update, UpdateKind
from features.chat.telegram.telegram_errors import MalformedUpdateError
from features.chat.telegram.telegram_update_parser import MAX_REPLY_DEPTH, parse_update, parse_updates
from util.error_codes import MALFORMED_UPDATE, UPDATE_TOO_DEEP


def message_payload(message_id: int = 10, text: str | None = "hello", **extra) -> dict:
    payload = {
        "message_id": message_id,
        "chat": {"id": 555, "type": "private"},
        "date": 1700000000,
        "from": {"id": 42, "is_bot": False, "first_name": "Ann"},
    }
    if text is not None:
        payload["text"] = text
    payload.update(extra)
    return payload


class TelegramUpdateParserTest(unittest.TestCase):

    def test_update_with_only_id(self):
        update = parse_update({"update_id": 1})

        self.assertEqual(update.update_id, 1)
        self.assertFalse(update.is_message())
        self.assertFalse(update.is_edited_message())
        self.assertFalse(update.is_callback_query())
        self.assertIsNone(update.kind)
        self.assertIsNone(update.effective_message)
        self.assertIsNone(update.chat_id)

    def test_message_update(self):
        update = parse_update({"update_id": 2, "message": message_payload()})

        self.assertTrue(update.is_message())
        self.assertEqual(update.kind, UpdateKind.message)
        self.assertEqual(update.message.text, "hello")
        self.assertEqual(update.message.from_user.first_name, "Ann")
        self.assertEqual(update.chat_id, 555)

    def test_edited_message_update(self):
        update = parse_update({"update_id": 3, "edited_message": message_payload(edit_date = 1700000100)})

        self.assertEqual(update.kind, UpdateKind.edited_message)
        self.assertTrue(update.is_edited_message())
        self.assertEqual(update.effective_message.edit_date, 1700000100)

    def test_callback_query_update(self):
        update = parse_update(
            {
                "update_id": 4,
                "callback_query": {
                    "id": "cb-1",
                    "from": {"id": 42, "is_bot": False, "first_name": "Ann"},
                    "data": "item:42",
                    "chat_instance": "abc",
                    "message": message_payload(text = "menu"),
                },
            },
        )

        self.assertEqual(update.kind, UpdateKind.callback_query)
        self.assertEqual(update.callback_query.data, "item:42")
        self.assertEqual(update.callback_query.from_user.id, 42)
        self.assertEqual(update.effective_message.text, "menu")
        self.assertEqual(update.chat_id, 555)

    def test_unknown_fields_are_ignored(self):
        update = parse_update(
            {
                "update_id": 5,
                "poll": {"id": "p"},
                "message": message_payload(some_future_field = {"nested": True}),
            },
        )

        self.assertEqual(update.message.message_id, 10)
        self.assertFalse(hasattr(update, "poll"))

    def test_photo_message(self):
        photo = [
            {"file_id": "small", "file_unique_id": "s", "width": 90, "height": 90},
            {"file_id": "large", "file_unique_id": "l", "width": 800, "height": 800},
        ]
        update = parse_update({"update_id": 6, "message": message_payload(text = None, photo = photo, caption = "look")})

        self.assertTrue(update.message.has_photo())
        self.assertEqual(update.message.best_photo().file_id, "large")
        self.assertEqual(update.message.caption, "look")

    def test_reply_chain_parses_eagerly(self):
        reply = message_payload(message_id = 9, text = "original")
        update = parse_update({"update_id": 7, "message": message_payload(reply_to_message = reply)})

        self.assertEqual(update.message.reply_to_message.text, "original")

    def test_message_without_chat_fails(self):
        payload = message_payload()
        del payload["chat"]

        with self.assertRaises(MalformedUpdateError) as context:
            parse_update({"update_id": 8, "message": payload})
        self.assertEqual(context.exception.error_code, MALFORMED_UPDATE)
        self.assertIn("message.chat", context.exception.message)

    def test_callback_query_without_sender_fails(self):
        with self.assertRaises(MalformedUpdateError):
            parse_update({"update_id": 9, "callback_query": {"id": "cb-2", "data": "x"}})

    def test_missing_update_id_fails(self):
        with self.assertRaises(MalformedUpdateError):
            parse_update({"message": message_payload()})

    def test_wrong_update_id_type_fails(self):
        with self.assertRaises(MalformedUpdateError):
            parse_update({"update_id": "not-a-number"})

    def test_non_object_fails(self):
        for raw in [None, [], "update", 42]:
            with self.assertRaises(MalformedUpdateError):
                parse_update(raw)

    def test_reply_chain_too_deep_fails(self):
        message = message_payload()
        for _ in range(MAX_REPLY_DEPTH + 1):
            message = message_payload(reply_to_message = message)

        with self.assertRaises(MalformedUpdateError) as context:
            parse_update({"update_id": 10, "message": message})
        self.assertEqual(context.exception.error_code, UPDATE_TOO_DEEP)

    def test_reply_chain_at_the_limit_parses(self):
        message = message_payload()
        for _ in range(MAX_REPLY_DEPTH):
            message = message_payload(reply_to_message = message)

        update = parse_update({"update_id": 11, "message": message})

        self.assertEqual(update.update_id, 11)

    def test_parsing_is_idempotent(self):
        raw = {"update_id": 12, "message": message_payload()}

        self.assertEqual(parse_update(raw), parse_update(raw))

    def test_update_is_immutable(self):
        update = parse_update({"update_id": 13})

        with self.assertRaises(Exception):
            update.update_id = 14

    def test_parse_updates_keeps_order(self):
        updates = parse_updates([{"update_id": 3}, {"update_id": 1}])

        self.assertEqual([update.update_id for update in updates], [3, 1])
        self.assertTrue(all(isinstance(update, Update) for update in updates))
