import json
import threading

from features.chat.telegram.handlers.update_handler import UpdateHandler
from features.chat.telegram.model.update import Update
from features.chat.telegram.polling.cursor_store import CursorStore
from features.chat.telegram.polling.telegram_update_fetcher import TelegramUpdateFetcher
from features.chat.telegram.sdk.telegram_bot_api import TelegramBotAPI
from features.chat.telegram.telegram_errors import (
    HandlerExecutionError,
    MalformedUpdateError,
    NoHandlerMatchedError,
    RemoteApiError,
)
from features.chat.telegram.telegram_update_parser import parse_update
from util import log
from util.config import config


class TelegramUpdateDispatcher:
    """
    Routes updates to the first registered handler that supports them.

    Updates arrive either from the polling loop (`poll_once`, `run_polling`) or one at a
    time from a webhook (`run_webhook`). Both go through `dispatch_safely`, so a failing
    handler never stops the loop or the rest of a batch.
    """

    __bot_api: TelegramBotAPI
    __fetcher: TelegramUpdateFetcher
    __handlers: list[UpdateHandler]
    __throw_on_missed_handler: bool
    __polling_interval_s: float
    __stop_requested: threading.Event

    def __init__(
        self,
        bot_api: TelegramBotAPI,
        cursor_store: CursorStore,
        handlers: list[UpdateHandler] | None = None,
        throw_on_missed_handler: bool = False,
        polling_interval_s: float = 1,
        skip_malformed_updates: bool = False,
        fetcher: TelegramUpdateFetcher | None = None,
    ):
        self.__bot_api = bot_api
        self.__fetcher = fetcher or TelegramUpdateFetcher(
            bot_api,
            cursor_store,
            skip_malformed_updates = skip_malformed_updates,
        )
        self.__handlers = list(handlers or [])
        self.__throw_on_missed_handler = throw_on_missed_handler
        self.__polling_interval_s = max(0.0, polling_interval_s)
        self.__stop_requested = threading.Event()

    @property
    def handlers(self) -> list[UpdateHandler]:
        return list(self.__handlers)

    def register_handler(self, handler: UpdateHandler) -> "TelegramUpdateDispatcher":
        self.__handlers.append(handler)
        log.t(f"Registered handler '{handler.name}'", position = len(self.__handlers))
        return self

    def dispatch(self, update: Update):
        """
        Runs the first handler that supports the update, and only that one.

        Raises:
            NoHandlerMatchedError: when nothing matches and missed handlers are configured to throw.
            HandlerExecutionError: when the matched handler fails; the original error is its cause.
        """
        if config.log_telegram_update:
            log.t(f"Routing update #{update.update_id}", update.model_dump(exclude_none = True, by_alias = True))
        for handler in self.__handlers:
            if not handler.supports(update):
                continue
            log.d(f"Update #{update.update_id} claimed by '{handler.name}'")
            try:
                handler.handle(update, self.__bot_api)
            except Exception as e:
                raise HandlerExecutionError(update.update_id, handler.name) from e
            return
        if self.__throw_on_missed_handler:
            raise NoHandlerMatchedError(update.update_id)
        log.t(f"No handler claimed update #{update.update_id}")

    def dispatch_safely(self, update: Update):
        try:
            self.dispatch(update)
        except NoHandlerMatchedError as e:
            log.w(e.message, update_id = update.update_id)
        except HandlerExecutionError as e:
            log.e(e.message, e.__cause__, update_id = update.update_id)
        except Exception as e:
            log.e(f"Failed to route update #{update.update_id}", e)

    def poll_once(self, limit: int | None = None, timeout_s: int | None = None) -> int:
        """Runs one fetch-and-route round and returns how many updates were routed. Never raises."""
        try:
            updates = self.__fetcher.fetch(limit, timeout_s)
        except RemoteApiError as e:
            log.e("Bot API rejected the update fetch", e, retry_after = e.retry_after)
            return 0
        except MalformedUpdateError as e:
            log.e("Received a malformed update batch", e)
            return 0
        except Exception as e:
            log.e("Failed to fetch updates", e)
            return 0
        for update in updates:
            self.dispatch_safely(update)
        if updates:
            log.d(f"Routed {len(updates)} update(s)")
        return len(updates)

    def run_polling(self, limit: int | None = None, timeout_s: int | None = None):
        """
        Polls until `stop` is requested. A stop request is checked before every fetch, so a
        batch that is already being routed always finishes first.
        """
        self.__stop_requested.clear()
        log.i("Polling for updates", limit = limit, timeout_s = timeout_s, interval_s = self.__polling_interval_s)
        while not self.__stop_requested.is_set():
            self.poll_once(limit, timeout_s)
            if self.__polling_interval_s > 0:
                self.__stop_requested.wait(self.__polling_interval_s)
        log.i("Polling stopped")

    def stop(self):
        self.__stop_requested.set()

    @property
    def is_stopping(self) -> bool:
        return self.__stop_requested.is_set()

    def run_webhook(self, raw_body: str | bytes) -> bool:
        """Dispatches one pushed update. Returns False without routing anything if the body is unusable."""
        if isinstance(raw_body, bytes):
            try:
                raw_body = raw_body.decode("utf-8")
            except UnicodeDecodeError as e:
                log.w("Webhook body is not valid UTF-8", e)
                return False
        if not raw_body or not raw_body.strip():
            log.w("Webhook body is empty")
            return False
        try:
            raw_update = json.loads(raw_body)
        except (ValueError, RecursionError) as e:
            log.w("Webhook body is not valid JSON", e)
            return False
        if not isinstance(raw_update, dict) or "update_id" not in raw_update:
            log.w("Webhook body has no update ID")
            return False
        try:
            update = parse_update(raw_update)
        except MalformedUpdateError as e:
            log.w("Webhook update is malformed", e)
            return False
        self.dispatch_safely(update)
        return True
