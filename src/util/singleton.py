import threading


class Singleton(type):
    _instances = {}
    _lock = threading.Lock()  # guards first construction across threads

    def __call__(cls, *args, **kwargs):
        with cls._lock:
            if cls not in cls._instances:
                cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]

    def reset_instance(cls):
        """Drops the cached instance so the next call builds a fresh one. Tests use it to rebuild config from a patched environment."""
        with cls._lock:
            cls._instances.pop(cls, None)
