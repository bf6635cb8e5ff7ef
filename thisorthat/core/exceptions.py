class GameException(Exception):
    """Base exception for game-related errors."""
    pass


class ValidationFailed(GameException):
    """Raised when a form or request field is missing or invalid."""
    pass


class AuthRequired(GameException):
    """Raised when a protected route gets no token or an invalid one."""
    pass


class NotGameOwner(GameException):
    """Raised when a caller tries to manage a game they did not create."""
    pass


class SlugTaken(GameException):
    """Raised when a new game reuses an existing slug."""
    pass


class GameNotFound(GameException):
    """Raised when a game is not found."""
    pass


class PlayerNotFound(GameException):
    """Raised when a player is not found."""
    pass


class QuestionNotFound(GameException):
    """Raised when a question is not found."""
    pass


class GameClosed(GameException):
    """Raised when answers are submitted to a game that is not open."""
    pass


class BackendError(GameException):
    """Raised when the storage or auth backend fails."""
    pass


class PartialWriteError(BackendError):
    """Raised when a multi-row write stops partway through."""

    def __init__(self, message: str, saved: int, total: int):
        super().__init__(message)
        self.saved = saved
        self.total = total
