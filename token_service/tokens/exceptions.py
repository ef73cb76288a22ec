class TokenServiceError(Exception):
    """Base class for token store failures. `status_code` is what the API answers with."""

    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: str | None = None, user_id: int | None = None):
        self.message = message or type(self).message
        self.user_id = user_id
        super().__init__(self.message)


class StartupError(TokenServiceError):
    """Store file is missing, unreadable or malformed. The service must not start."""


class PersistenceError(TokenServiceError):
    message = "Failed to persist tokens"


class TokenExistsError(TokenServiceError):
    status_code = 409
    message = "A token already exists for this user ID"


class TokenNotFoundError(TokenServiceError):
    status_code = 404
    message = "No token found for this user ID"
