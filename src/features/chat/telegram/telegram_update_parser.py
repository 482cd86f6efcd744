from typing import Any

from pydantic import ValidationError as PydanticValidationError

from features.chat.telegram.model.update import Update
from features.chat.telegram.telegram_errors import MalformedUpdateError
from util.error_codes import UPDATE_TOO_DEEP

MAX_REPLY_DEPTH = 50


def parse_update(raw_update: Any) -> Update:
    """
    Builds a typed update from a decoded JSON tree.

    Parsing is pure: no I/O, unknown fields are ignored, and an update with no payload we
    know about is still valid. A payload that is present but lacks its own required fields
    (e.g. a message without a chat) fails the whole update.

    Raises:
        MalformedUpdateError: when the tree is not an object, a required field is missing
            or has the wrong type, or reply chains nest deeper than MAX_REPLY_DEPTH.
    """
    if not isinstance(raw_update, dict):
        raise MalformedUpdateError(f"Update must be a JSON object, got '{type(raw_update).__name__}'")
    if "update_id" not in raw_update:
        raise MalformedUpdateError("Update is missing 'update_id'")
    __check_reply_depth(raw_update)
    try:
        return Update.model_validate(raw_update)
    except PydanticValidationError as e:
        raise MalformedUpdateError(__describe(raw_update, e)) from e


def parse_updates(raw_updates: list[Any]) -> list[Update]:
    return [parse_update(raw_update) for raw_update in raw_updates]


def __check_reply_depth(raw_update: dict[str, Any]):
    callback_query = raw_update.get("callback_query")
    roots = [
        raw_update.get("message"),
        raw_update.get("edited_message"),
        callback_query.get("message") if isinstance(callback_query, dict) else None,
    ]
    for root in roots:
        depth = 0
        current = root
        while isinstance(current, dict) and current.get("reply_to_message") is not None:
            depth += 1
            if depth > MAX_REPLY_DEPTH:
                raise MalformedUpdateError(
                    f"Update #{raw_update.get('update_id')} nests replies deeper than {MAX_REPLY_DEPTH}",
                    UPDATE_TOO_DEEP,
                )
            current = current["reply_to_message"]


def __describe(raw_update: dict[str, Any], error: PydanticValidationError) -> str:
    problems = [
        f"{'.'.join(str(part) for part in problem['loc'])}: {problem['msg']}"
        for problem in error.errors()
    ]
    return f"Update #{raw_update.get('update_id')} is malformed ({'; '.join(problems)})"
