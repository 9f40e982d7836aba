"""Error taxonomy shared by the services and the HTTP layer.

Validation and cooldown errors carry precise, user-facing detail. Storage
problems collapse into a single generic internal error at the HTTP edge.
"""


class GameError(Exception):
    """Base class for all domain errors."""


class ValidationError(GameError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CooldownActive(GameError):
    """The player already has an accepted guess inside the cooldown window."""

    def __init__(self, retry_after: float):
        super().__init__(f'cooldown active, retry after {retry_after:.1f}s')
        self.retry_after = retry_after


class NoPriceAvailable(GameError):
    """The price series is still empty."""


class UpstreamFetchFailure(GameError):
    """The external price feed did not return a usable price."""

    def __init__(self, message: str, detail=None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class StorageFailure(GameError):
    """A write against the database failed and was rolled back."""
