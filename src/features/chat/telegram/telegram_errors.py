from typing import Any

from util.error_codes import HANDLER_FAILED, MALFORMED_UPDATE, NO_HANDLER_MATCHED, REMOTE_API_FAILED
from util.errors import ExternalServiceError, InternalError, NotFoundError, ValidationError


class MalformedUpdateError(ValidationError):
    """A payload is missing a field required at its nesting level, or cannot be read at all."""

    def __init__(self, message: str, error_code: int = MALFORMED_UPDATE):
        super().__init__(message, error_code)


class RemoteApiError(ExternalServiceError):
    """The Bot API answered, but reported `ok: false`."""

    api_error_code: int
    description: str
    retry_after: int | None

    def __init__(self, description: str, api_error_code: int, retry_after: int | None = None):
        super().__init__(f"Bot API error [{api_error_code}]: {description}", REMOTE_API_FAILED)
        self.api_error_code = api_error_code
        self.description = description
        self.retry_after = retry_after

    @classmethod
    def from_response(cls, envelope: dict[str, Any]) -> "RemoteApiError":
        parameters = envelope.get("parameters") or {}
        retry_after = parameters.get("retry_after") if isinstance(parameters, dict) else None
        return cls(
            description = envelope.get("description") or "Unknown API error",
            api_error_code = envelope.get("error_code") or 0,
            retry_after = retry_after,
        )


class NoHandlerMatchedError(NotFoundError):

    update_id: int

    def __init__(self, update_id: int):
        super().__init__(f"No handler found for update #{update_id}", NO_HANDLER_MATCHED)
        self.update_id = update_id


class HandlerExecutionError(InternalError):

    update_id: int
    handler_name: str

    def __init__(self, update_id: int, handler_name: str):
        super().__init__(f"Handler '{handler_name}' failed on update #{update_id}", HANDLER_FAILED)
        self.update_id = update_id
        self.handler_name = handler_name
