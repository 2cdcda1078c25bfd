"""
Exception hierarchy for restock_server.

Every error raised by the core derives from `RestockError`, so callers that
only want to report a failure can catch the base class, while the HTTP layer
maps the specific subclasses to status codes.

All of them are local and recoverable: none is fatal to the process.
"""


class RestockError(Exception):
    """
    Base exception for all restock_server errors.

    Example
    -------
    >>> try:
    ...     server.set_item_stock("Sword", -1)
    ... except RestockError as exc:
    ...     report(exc.code)
    """

    #: Stable error code for programmatic handling (e.g. JSON error bodies).
    code: str = "restock_error"

    def __init__(self, message: str | None = None) -> None:
        if message is None:
            message = "An unspecified restock_server error occurred."
        super().__init__(message)


class NotFoundError(RestockError):
    """
    Raised when an administrative stock edit names an item that is not part
    of the catalog. Inventory state is left unchanged.
    """

    code: str = "not_found"


class InvalidAmountError(RestockError):
    """
    Raised for a negative (or non-integer) stock amount, or a restock interval
    that is not a positive integer.
    """

    code: str = "invalid_amount"


class AlreadyClosedError(RestockError):
    """
    Raised when a waiter is resolved after its channel has already been
    closed, typically because the client disconnected.

    `WaiterRegistry.notify_all` catches and logs it so that one dead waiter
    never blocks the others.
    """

    code: str = "already_closed"


class WaiterLimitExceeded(RestockError):
    """
    Raised when a long-poll request arrives while the registry already holds
    the configured maximum number of pending waiters.

    Common causes
    -------------
    - Many clients polling a single server
    - Clients that never disconnect while `MAX_WAIT_SECONDS` is unset
    """

    code: str = "waiter_limit_exceeded"


class InvalidCatalogError(RestockError):
    """
    Raised when an item definition is malformed (duplicate name, chance
    outside [0, 1], quantity bounds out of order).
    """

    code: str = "invalid_catalog"
