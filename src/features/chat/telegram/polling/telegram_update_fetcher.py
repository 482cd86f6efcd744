from typing import Any

from features.chat.telegram.model.update import Update
from features.chat.telegram.polling.cursor_store import LAST_UPDATE_ID_KEY, CursorStore
from features.chat.telegram.sdk.telegram_bot_api import TelegramBotAPI
from features.chat.telegram.telegram_errors import MalformedUpdateError, RemoteApiError
from features.chat.telegram.telegram_update_parser import parse_update
from util import log
from util.config import config
from util.error_codes import INVALID_API_RESPONSE, INVALID_POLLING_LIMIT, INVALID_POLLING_TIMEOUT
from util.errors import ExternalServiceError, ValidationError
from util.functions import to_int_or_none

MIN_LIMIT = 1
MAX_LIMIT = 100


class TelegramUpdateFetcher:
    """
    Pulls update batches with `getUpdates` and keeps the polling cursor in the cursor store.

    The cursor only moves forward: it is set to the largest update id seen in a non-empty,
    successful batch, and left untouched by empty or failed rounds.
    """

    __bot_api: TelegramBotAPI
    __cursor_store: CursorStore
    __limit: int
    __timeout_s: int
    __skip_malformed_updates: bool

    def __init__(
        self,
        bot_api: TelegramBotAPI,
        cursor_store: CursorStore,
        limit: int = MAX_LIMIT,
        timeout_s: int = 0,
        skip_malformed_updates: bool = False,
    ):
        self.__bot_api = bot_api
        self.__cursor_store = cursor_store
        self.__limit = self.__validate_limit(limit)
        self.__timeout_s = self.__validate_timeout(timeout_s)
        self.__skip_malformed_updates = skip_malformed_updates

    @property
    def last_update_id(self) -> int | None:
        return to_int_or_none(self.__cursor_store.get(LAST_UPDATE_ID_KEY))

    def build_request_params(self, limit: int | None = None, timeout_s: int | None = None) -> dict[str, int]:
        last_update_id = self.last_update_id
        return {
            "offset": last_update_id + 1 if last_update_id and last_update_id > 0 else 0,
            "limit": self.__validate_limit(limit) if limit is not None else self.__limit,
            "timeout": self.__validate_timeout(timeout_s) if timeout_s is not None else self.__timeout_s,
        }

    def fetch(self, limit: int | None = None, timeout_s: int | None = None) -> list[Update]:
        params = self.build_request_params(limit, timeout_s)
        log.t("Fetching updates", **params)
        # the server may hold the connection for the whole long-poll window
        envelope = self.__bot_api.call(
            "getUpdates",
            params,
            timeout_s = params["timeout"] + config.web_timeout_s,
        )
        return self.fold_response(envelope)

    def fold_response(self, envelope: dict[str, Any]) -> list[Update]:
        """
        Folds one `getUpdates` response into the cursor store and returns the parsed batch.

        Raises:
            RemoteApiError: when the response reports `ok: false`; the cursor is not touched.
            MalformedUpdateError: when an element cannot be parsed and malformed updates are
                not skipped; the cursor is not touched.
        """
        if not envelope.get("ok"):
            raise RemoteApiError.from_response(envelope)
        raw_updates = envelope.get("result")
        if raw_updates is None:
            raw_updates = []
        if not isinstance(raw_updates, list):
            raise ExternalServiceError(log.e("Update batch is not a list"), INVALID_API_RESPONSE)
        if not raw_updates:
            log.t("No new updates")
            return []

        updates: list[Update] = []
        seen_ids: list[int] = []
        for raw_update in raw_updates:
            try:
                update = parse_update(raw_update)
            except MalformedUpdateError as e:
                if not self.__skip_malformed_updates:
                    raise
                log.w("Skipping a malformed update", e)
                raw_id = to_int_or_none(raw_update.get("update_id")) if isinstance(raw_update, dict) else None
                if raw_id is not None:
                    seen_ids.append(raw_id)
                continue
            updates.append(update)
            seen_ids.append(update.update_id)

        if seen_ids:
            self.__advance_cursor(max(seen_ids))
        return updates

    def __advance_cursor(self, candidate_id: int):
        stored_id = self.last_update_id
        if stored_id is not None and stored_id >= candidate_id:
            log.w(f"Batch did not pass the stored cursor #{stored_id}", candidate_id = candidate_id)
            return
        self.__cursor_store.set(LAST_UPDATE_ID_KEY, candidate_id)
        log.d(f"Cursor advanced to #{candidate_id}")

    @staticmethod
    def __validate_limit(limit: int) -> int:
        if isinstance(limit, bool) or not isinstance(limit, int) or not MIN_LIMIT <= limit <= MAX_LIMIT:
            message = f"Polling limit must be between {MIN_LIMIT} and {MAX_LIMIT}, got '{limit}'"
            raise ValidationError(message, INVALID_POLLING_LIMIT)
        return limit

    @staticmethod
    def __validate_timeout(timeout_s: int) -> int:
        if isinstance(timeout_s, bool) or not isinstance(timeout_s, int) or timeout_s < 0:
            raise ValidationError(f"Polling timeout must be a non-negative integer, got '{timeout_s}'", INVALID_POLLING_TIMEOUT)
        return timeout_s
