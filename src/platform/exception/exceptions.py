class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


# === Ticket pool ===


class NotConfiguredError(CustomBaseError):
    """No active event configuration; callers retry after a pause"""

    def __init__(self, message: str = 'Ticket pool is not configured') -> None:
        super().__init__(message, 503)


class PoolClosedError(NotConfiguredError):
    def __init__(self, message: str = 'Ticket pool has been shut down') -> None:
        super().__init__(message)


class InvalidConfigurationError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class CapacityExceededError(ConflictError):
    """Release would push the pool above max_capacity"""


class LimitExceededError(ConflictError):
    """Release would push a vendor above its tickets_to_sell"""


class LimitReachedError(ConflictError):
    """Participant already hit its lifetime cap - terminal for that participant"""


class ProcessingError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 500)
