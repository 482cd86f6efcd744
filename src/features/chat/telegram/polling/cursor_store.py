import json
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from typing import Any

from util import log
from util.error_codes import INVALID_CURSOR_STORE
from util.errors import ConfigurationError

LAST_UPDATE_ID_KEY = "last_update_id"


class CursorStore(ABC):
    """
    Small key-value store that survives between polling rounds.

    Keys and values are opaque to the store; the fetcher reserves LAST_UPDATE_ID_KEY for the
    id of the newest update it has already handed out. Implementations serialize their own
    get/set pairs, so a polling loop and a webhook may share one instance.
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError()

    @abstractmethod
    def set(self, key: str, value: Any):
        raise NotImplementedError()

    @abstractmethod
    def has(self, key: str) -> bool:
        raise NotImplementedError()

    @abstractmethod
    def delete(self, key: str):
        raise NotImplementedError()

    @abstractmethod
    def clear(self):
        raise NotImplementedError()


class InMemoryCursorStore(CursorStore):

    _values: dict[str, Any]
    _lock: threading.Lock

    def __init__(self, values: dict[str, Any] | None = None):
        self._values = dict(values or {})
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._values.get(key, default)

    def set(self, key: str, value: Any):
        with self._lock:
            self._values[key] = value

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._values

    def delete(self, key: str):
        with self._lock:
            self._values.pop(key, None)

    def clear(self):
        with self._lock:
            self._values.clear()


class FileCursorStore(InMemoryCursorStore):
    """
    Keeps the values in memory and rewrites the whole JSON file on every mutation.

    A mutation only takes effect in memory once the file has been replaced, so a value that
    cannot be written leaves both copies as they were. Fine for a single polling process;
    not meant for frequent concurrent writers.
    """

    __file_path: str

    def __init__(self, file_path: str):
        super().__init__(self.__load(file_path))
        self.__file_path = file_path

    @property
    def file_path(self) -> str:
        return self.__file_path

    def set(self, key: str, value: Any):
        with self._lock:
            updated = dict(self._values)
            updated[key] = value
            self.__persist(updated)
            self._values = updated

    def delete(self, key: str):
        with self._lock:
            if key not in self._values:
                return
            updated = dict(self._values)
            del updated[key]
            self.__persist(updated)
            self._values = updated

    def clear(self):
        with self._lock:
            self.__persist({})
            self._values = {}

    def __persist(self, values: dict[str, Any]):
        try:
            contents = json.dumps(values)
        except (TypeError, ValueError) as e:
            message = log.e(f"Cursor values for '{self.__file_path}' are not JSON-serializable", e)
            raise ConfigurationError(message, INVALID_CURSOR_STORE) from e
        directory = os.path.dirname(self.__file_path)
        temp_path: str | None = None
        try:
            if directory:
                os.makedirs(directory, exist_ok = True)
            descriptor, temp_path = tempfile.mkstemp(dir = directory or ".", prefix = ".cursor-", suffix = ".tmp")
            with os.fdopen(descriptor, "w", encoding = "utf-8") as file:
                file.write(contents)
            os.replace(temp_path, self.__file_path)
        except OSError as e:
            if temp_path and os.path.exists(temp_path):
                os.remove(temp_path)
            message = log.e(f"Failed to write cursor file at '{self.__file_path}'", e)
            raise ConfigurationError(message, INVALID_CURSOR_STORE) from e

    @staticmethod
    def __load(file_path: str) -> dict[str, Any]:
        if not os.path.exists(file_path):
            log.d(f"No cursor file at '{file_path}', starting empty")
            return {}
        try:
            with open(file_path, "r", encoding = "utf-8") as file:
                contents = file.read()
            if not contents.strip():
                return {}
            values = json.loads(contents)
        except (OSError, ValueError) as e:
            log.w(f"Cursor file at '{file_path}' is unreadable, starting empty", e)
            return {}
        if not isinstance(values, dict):
            log.w(f"Cursor file at '{file_path}' does not hold an object, starting empty")
            return {}
        return values
