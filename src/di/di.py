from __future__ import annotations

from typing import TYPE_CHECKING

from util.config import Config, config

if TYPE_CHECKING:
    from features.chat.telegram.handlers.update_handler import UpdateHandler
    from features.chat.telegram.polling.cursor_store import CursorStore
    from features.chat.telegram.polling.telegram_update_fetcher import TelegramUpdateFetcher
    from features.chat.telegram.sdk.telegram_bot_api import TelegramBotAPI
    from features.chat.telegram.telegram_update_dispatcher import TelegramUpdateDispatcher


class DI:

    # Dynamic dependencies
    _config: Config
    _handlers: list[UpdateHandler] | None
    # SDKs
    _telegram_bot_api: "TelegramBotAPI | None"
    # Storage
    _cursor_store: "CursorStore | None"
    # Features
    _update_fetcher: "TelegramUpdateFetcher | None"
    _update_dispatcher: "TelegramUpdateDispatcher | None"

    def __init__(
        self,
        config_override: Config | None = None,
        handlers: list[UpdateHandler] | None = None,
    ):
        # Dynamic dependencies
        self._config = config_override or config
        self._handlers = handlers
        # SDKs
        self._telegram_bot_api = None
        # Storage
        self._cursor_store = None
        # Features
        self._update_fetcher = None
        self._update_dispatcher = None

    # === SDKs ===

    @property
    def telegram_bot_api(self) -> TelegramBotAPI:
        if self._telegram_bot_api is None:
            from features.chat.telegram.sdk.telegram_bot_api import TelegramBotAPI
            self._telegram_bot_api = TelegramBotAPI(
                token = self._config.telegram_bot_token,
                api_base_url = self._config.telegram_api_base_url,
                timeout_s = self._config.web_timeout_s,
            )
        return self._telegram_bot_api

    # === Storage ===

    @property
    def cursor_store(self) -> CursorStore:
        if self._cursor_store is None:
            from features.chat.telegram.polling.cursor_store import FileCursorStore, InMemoryCursorStore
            if self._config.cursor_store_path:
                self._cursor_store = FileCursorStore(self._config.cursor_store_path)
            else:
                self._cursor_store = InMemoryCursorStore()
        return self._cursor_store

    # === Features ===

    @property
    def update_fetcher(self) -> TelegramUpdateFetcher:
        if self._update_fetcher is None:
            from features.chat.telegram.polling.telegram_update_fetcher import TelegramUpdateFetcher
            self._update_fetcher = TelegramUpdateFetcher(
                self.telegram_bot_api,
                self.cursor_store,
                limit = self._config.polling_limit,
                timeout_s = self._config.polling_timeout_s,
                skip_malformed_updates = self._config.skip_malformed_updates,
            )
        return self._update_fetcher

    @property
    def update_dispatcher(self) -> TelegramUpdateDispatcher:
        if self._update_dispatcher is None:
            from features.chat.telegram.telegram_update_dispatcher import TelegramUpdateDispatcher
            if self._handlers is None:
                from features.chat.telegram.default_handlers import build_default_handlers
                self._handlers = build_default_handlers(self._config.telegram_bot_username)
            self._update_dispatcher = TelegramUpdateDispatcher(
                self.telegram_bot_api,
                self.cursor_store,
                handlers = self._handlers,
                throw_on_missed_handler = self._config.throw_on_missed_handler,
                polling_interval_s = self._config.polling_interval_s,
                fetcher = self.update_fetcher,
            )
        return self._update_dispatcher
