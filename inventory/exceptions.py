"""Error taxonomy shared by inventory write paths and the analytics readers."""


class InventoryError(Exception):
    """Base class for inventory failures surfaced to callers."""

    code = "inventory_error"

    def __init__(self, message: str = "", *, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


class NotFoundError(InventoryError):
    code = "not_found"


class InvalidInputError(InventoryError):
    code = "invalid_input"


class StorageFailureError(InventoryError):
    code = "storage_failure"


class LedgerImmutableError(InventoryError):
    code = "ledger_immutable"


# EOF
