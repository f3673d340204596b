class PatternHubError(Exception):
    """Base class for errors raised by PatternHub collaborators"""


class NotFoundError(PatternHubError):
    pass


class ValidationError(PatternHubError):
    """Missing or malformed input at an API boundary"""


class TransportError(PatternHubError):
    """Network or storage failure talking to an external collaborator"""


class LLMServiceError(TransportError):
    pass


class FavoriteError(PatternHubError):
    """Base class for favorites failures, all of them recoverable"""


class FavoriteValidationError(FavoriteError):
    pass


class FavoriteTransportError(FavoriteError):
    pass


class FavoriteToggleError(FavoriteError):
    """
    Raised by the reconciler after a failed toggle has been rolled back.
    The local favorite view is back to the last confirmed state.
    """

    def __init__(self, pattern_id, cause: Exception):
        super().__init__(f"Could not toggle favorite for pattern {pattern_id}: {cause}")
        self.pattern_id = pattern_id
        self.cause = cause
