"""Domain error taxonomy.

Each error carries the fixed, client-safe message and the HTTP status the
request adapter answers with. Storage failures keep the underlying exception
as ``__cause__`` for logging only.
"""


class TaskManagerError(Exception):
    """Base class for all task manager errors."""

    message = "Internal server error"
    status_code = 500

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(TaskManagerError):
    """Client supplied invalid data."""

    message = "Invalid request"
    status_code = 400


class TitleTooShort(ValidationError):
    message = "Title must be at least 3 characters. Please check the input and try again"


class InvalidStatus(ValidationError):
    message = "Invalid status! Status can be only: `new`, `in_progress` or `done`"


class InvalidIdentifier(ValidationError):
    message = "Invalid id! Id must be a valid uuid"


class InvalidQueryParam(ValidationError):
    message = "Invalid query parameter"


class InvalidPayload(ValidationError):
    message = "Invalid JSON! Can't parse incoming model, please check the input"


class TaskNotFound(TaskManagerError):
    message = "Not found!"
    status_code = 404


class StorageError(TaskManagerError):
    """Infrastructure fault in the underlying store.

    ``detail`` only reaches logs; clients always get the class message.
    """

    message = "Internal server error"
    status_code = 500

    def __init__(self, detail: str | None = None) -> None:
        Exception.__init__(self, detail or self.message)


class DeadlineExceeded(StorageError):
    message = "Request timed out"
    status_code = 504
