from fastapi import status


class NotificationError(Exception):
    """Base error rendered as ``{"error": ..., "details": ...}`` by the API layer."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Notification could not be sent"

    def __init__(self, details: str | None = None, *, error: str | None = None):
        self.details = details
        if error is not None:
            self.error = error
        super().__init__(details or self.error)

    def to_dict(self) -> dict:
        body = {"error": self.error}
        if self.details:
            body["details"] = self.details
        return body


class AuthError(NotificationError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"


class ValidationError(NotificationError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid request"


class CollaboratorInitError(NotificationError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Firebase could not be initialized"


class DirectoryError(NotificationError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Recipient lookup failed"


class DispatchError(NotificationError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Notification could not be sent"
