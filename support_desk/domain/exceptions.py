"""Domain-level error types."""


class BackendError(Exception):
    """The ticketing backend failed or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AccessDeniedError(Exception):
    """An actor is not allowed to perform an action on a ticket."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class TriggerAuthError(Exception):
    """An auto-assignment trigger failed authentication."""

    def __init__(self, message: str, status_code: int = 403):
        super().__init__(message)
        self.status_code = status_code
