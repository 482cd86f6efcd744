# ruff: noqa: E501

import os
from typing import Callable

from pydantic import SecretStr

from util.singleton import Singleton

IN_MEMORY_CURSOR_STORE = "memory"


class Config(metaclass = Singleton):

    log_level: str
    log_telegram_update: bool
    web_timeout_s: int
    telegram_api_base_url: str
    telegram_bot_username: str | None
    telegram_must_auth: bool
    polling_limit: int
    polling_timeout_s: int
    polling_interval_s: float
    cursor_store_path: str | None
    throw_on_missed_handler: bool
    skip_malformed_updates: bool
    version: str

    telegram_auth_key: SecretStr
    telegram_bot_token: SecretStr

    def all_secrets(self) -> list[SecretStr]:
        return [
            self.telegram_auth_key,
            self.telegram_bot_token,
        ]

    def __init__(
        self,
        def_log_level: str = "INFO",
        def_log_telegram_update: bool = False,
        def_web_timeout_s: int = 10,
        def_telegram_api_base_url: str = "https://api.telegram.org",
        def_telegram_bot_username: str = "",
        def_telegram_must_auth: bool = False,
        def_polling_limit: int = 100,
        def_polling_timeout_s: int = 0,
        def_polling_interval_s: float = 1,
        def_cursor_store_path: str = "/tmp/bot_cursor_store.json",
        def_throw_on_missed_handler: bool = False,
        def_skip_malformed_updates: bool = False,
        def_version: str = "dev",

        def_telegram_auth_key: SecretStr = SecretStr("it_is_really_telegram"),
        def_telegram_bot_token: SecretStr = SecretStr("invalid"),
    ):
        # @formatter:off
        self.log_level = self.__env("LOG_LEVEL", lambda: def_log_level).lower()
        self.log_telegram_update = self.__env("LOG_TG_UPDATE", lambda: str(def_log_telegram_update)).lower() == "true"
        self.web_timeout_s = int(self.__env("WEB_TIMEOUT_S", lambda: str(def_web_timeout_s)))
        self.telegram_api_base_url = self.__env("TELEGRAM_API_BASE_URL", lambda: def_telegram_api_base_url).rstrip("/")
        self.telegram_bot_username = self.__env("TELEGRAM_BOT_USERNAME", lambda: def_telegram_bot_username).lstrip("@") or None
        self.telegram_must_auth = self.__env("TELEGRAM_AUTH_ON", lambda: str(def_telegram_must_auth)).lower() == "true"
        self.polling_limit = int(self.__env("POLLING_LIMIT", lambda: str(def_polling_limit)))
        self.polling_timeout_s = int(self.__env("POLLING_TIMEOUT_S", lambda: str(def_polling_timeout_s)))
        self.polling_interval_s = float(self.__env("POLLING_INTERVAL_S", lambda: str(def_polling_interval_s)))
        cursor_store_path = self.__env("CURSOR_STORE_PATH", lambda: def_cursor_store_path)
        self.cursor_store_path = None if cursor_store_path.lower() == IN_MEMORY_CURSOR_STORE else cursor_store_path
        self.throw_on_missed_handler = self.__env("THROW_ON_MISSED_HANDLER", lambda: str(def_throw_on_missed_handler)).lower() == "true"
        self.skip_malformed_updates = self.__env("SKIP_MALFORMED_UPDATES", lambda: str(def_skip_malformed_updates)).lower() == "true"
        self.version = self.__env("VERSION", lambda: def_version)

        self.telegram_auth_key = self.__senv("TELEGRAM_API_UPDATE_AUTH_TOKEN", lambda: def_telegram_auth_key)
        self.telegram_bot_token = self.__senv("TELEGRAM_BOT_TOKEN", lambda: def_telegram_bot_token)
        # @formatter:on

    @staticmethod
    def __env(name: str, default: Callable[[], str]) -> str:
        env_value = os.environ.get(name, "").strip()
        return env_value if env_value else default()

    @staticmethod
    def __senv(name: str, default: Callable[[], SecretStr]) -> SecretStr:
        env_value = os.environ.get(name, "").strip()
        return SecretStr(env_value) if env_value else default()


config = Config()
