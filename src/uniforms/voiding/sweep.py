"""Auto-void sweep — cancel orders that were never claimed in time.

Run periodically (``manage.py void-unclaimed`` or the maintenance endpoint).
Each void is a regular ``UpdateOrderStatus`` to cancelled with ``voided``
set, so stock is released and a strike lands on the student's ledger.

The sweep is an application service rather than a command handler: every
void is processed as its own top-level command and commits in its own unit
of work. An order the state machine refuses (a void racing with a claim) is
logged and skipped without undoing the voids around it.

Two windows are supported: a long window voids every unclaimed order, a
short window (``unconfirmed_only``) voids only orders the student never
confirmed. Pre-orders are swept like any other unclaimed order.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

import structlog
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from uniforms.order.order import OrderStatus
from uniforms.order.queries import unclaimed_orders
from uniforms.order.status import UpdateOrderStatus
from uniforms.shared.clock import as_utc

logger = structlog.get_logger(__name__)


class WindowUnit(Enum):
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"


_UNIT_SECONDS = {
    WindowUnit.SECONDS: 1,
    WindowUnit.MINUTES: 60,
    WindowUnit.HOURS: 3600,
    WindowUnit.DAYS: 86400,
}


def void_note(window, unit) -> str:
    return f"Auto-voided: not claimed within {window} {unit.rstrip('s')}(s)."


def void_cutoff(window, unit, as_of=None) -> datetime:
    """Orders created at or before the returned instant are due."""
    if window is None or window < 1:
        raise ValidationError({"window": ["Window must be at least 1"]})
    try:
        unit = WindowUnit(unit)
    except ValueError:
        raise ValidationError({"window_unit": [f"Unknown window unit '{unit}'"]}) from None

    as_of = as_utc(as_of) or datetime.now(UTC)
    return as_of - timedelta(seconds=window * _UNIT_SECONDS[unit])


def is_due(order, cutoff, unconfirmed_only=False) -> bool:
    if order.created_at is None or as_utc(order.created_at) > cutoff:
        return False
    if unconfirmed_only and order.student_confirmed_at is not None:
        return False
    return True


def void_unclaimed_orders(window, window_unit=WindowUnit.DAYS.value, unconfirmed_only=False, as_of=None) -> dict:
    """Void every unclaimed order older than the window; returns the ids actually voided."""
    unit = window_unit or WindowUnit.DAYS.value
    cutoff = void_cutoff(window, unit, as_of)
    note = void_note(window, unit)

    due = [order for order in unclaimed_orders() if is_due(order, cutoff, unconfirmed_only)]
    logger.info(
        "Sweeping unclaimed orders",
        cutoff=cutoff.isoformat(),
        unconfirmed_only=bool(unconfirmed_only),
        due_count=len(due),
    )

    voided = []
    for order in due:
        order_id = str(order.id)
        try:
            current_domain.process(
                UpdateOrderStatus(
                    order_id=order_id,
                    status=OrderStatus.CANCELLED.value,
                    note=note,
                    voided=True,
                ),
                asynchronous=False,
            )
        except (ValidationError, InvalidOperationError, ObjectNotFoundError) as exc:
            logger.warning("Failed to void order", order_id=order_id, error=str(exc))
            continue

        voided.append(order_id)
        logger.info(
            "Order auto-voided",
            order_id=order_id,
            student_id=str(order.student_id),
            order_type=order.order_type,
            created_at=str(order.created_at),
        )

    logger.info("Auto-void sweep complete", voided_count=len(voided))
    return {"voided_count": len(voided), "order_ids": voided}
