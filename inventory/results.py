"""Result records returned by single-item inventory operations.

Failures are returned, not raised, so callers can render a field-level
message: ``success`` is False and ``error_code`` is one of ``not_found``,
``invalid_input`` or ``storage_failure``.
"""

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from .exceptions import InventoryError


@dataclass
class OperationResult:
    success: bool = True
    message: str = ""
    error_code: Optional[str] = None
    field: Optional[str] = None

    @classmethod
    def failure(cls, exc: InventoryError, **values):
        return cls(success=False, message=exc.message or str(exc), error_code=exc.code, field=exc.field, **values)


@dataclass
class InspectionResult(OperationResult):
    batch_id: Optional[int] = None
    batch_no: str = ""
    flower_name: str = ""
    received_qty: int = 0
    passed_qty: int = 0
    pass_rate: Decimal = Decimal("0")
    inspected_at: Optional[dt.datetime] = None

    @property
    def failed_qty(self) -> int:
        return self.received_qty - self.passed_qty


@dataclass
class StockAdjustmentResult(OperationResult):
    flower_id: Optional[int] = None
    flower_name: str = ""
    old_stock: int = 0
    new_stock: int = 0
    adjustment_qty: int = 0
    reason: str = ""
    adjusted_at: Optional[dt.datetime] = None


@dataclass
class ShipmentResult(OperationResult):
    flower_id: Optional[int] = None
    flower_name: str = ""
    quantity: int = 0
    remaining_stock: int = 0
    shipped_at: Optional[dt.datetime] = None
    # Post-shipment replenishment recommendation, when one could be computed
    recommendation: Any = field(default=None)


# EOF
