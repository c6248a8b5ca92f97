class WishriftError(Exception):
    """Base class for domain errors raised by the service layer."""


class ValidationError(WishriftError):
    def __init__(self, message: str, field: str | None = None, errors=None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.errors = errors or (
            [{"field": field, "message": message}] if field else []
        )


class NotFoundError(WishriftError):
    """
    Raised when an entity does not exist or the caller may not see it.

    The message is the same in both cases so private lists cannot be probed.
    """

    def __init__(self, entity: str, key=None):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.key = key


class PersistenceError(WishriftError):
    """Storage failure. Details are logged, never returned to clients."""
