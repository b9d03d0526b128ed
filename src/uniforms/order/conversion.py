"""Pre-order conversion — a restocked pre-order becomes a regular order.

Conversion reserves stock for every line exactly as a fresh regular order
would. When the order is not in a convertible state, or has no line for the
restocked item, the result is a ``ConversionMismatch`` rather than an error:
restock processing moves on to the next order.
"""

from dataclasses import dataclass
from enum import Enum

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from uniforms.domain import uniforms
from uniforms.item.store import VariantStore
from uniforms.order.order import CONVERTIBLE_STATUSES, Order, OrderStatus

logger = structlog.get_logger(__name__)


class MismatchReason(Enum):
    INACTIVE = "inactive"
    NOT_PRE_ORDER = "not_pre_order"
    NOT_CONVERTIBLE = "not_convertible"
    NO_MATCHING_LINE = "no_matching_line"


@dataclass(frozen=True)
class ConversionMismatch:
    order_id: str
    reason: MismatchReason

    def to_dict(self) -> dict:
        return {"order_id": self.order_id, "converted": False, "reason": self.reason.value}


@uniforms.command(part_of="Order")
class ConvertPreOrder:
    order_id = Identifier(required=True)
    item_name = String(required=True, max_length=255)
    size = String(max_length=50)


def _mismatch(order, item_name, size):
    if not order.is_active:
        return MismatchReason.INACTIVE
    if not order.is_pre_order:
        return MismatchReason.NOT_PRE_ORDER
    if OrderStatus(order.status) not in CONVERTIBLE_STATUSES:
        return MismatchReason.NOT_CONVERTIBLE
    if order.line_matching(item_name, size) is None:
        return MismatchReason.NO_MATCHING_LINE
    return None


@uniforms.command_handler(part_of=Order)
class ConvertPreOrderHandler:
    @handle(ConvertPreOrder)
    def convert(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        reason = _mismatch(order, command.item_name, command.size)
        if reason is not None:
            logger.info(
                "Pre-order conversion skipped",
                order_id=str(order.id),
                item=command.item_name,
                size=command.size,
                reason=reason.value,
            )
            return ConversionMismatch(str(order.id), reason).to_dict()

        order.convert_to_regular(command.item_name, command.size)

        store = VariantStore()
        inventory_updates = store.reserve_lines(order.items, order.education_level)
        store.save()

        failures = [update for update in inventory_updates if not update["success"]]
        if failures:
            order.record_inventory_mismatch(failures)
        repo.add(order)

        logger.info(
            "Pre-order converted",
            order_id=str(order.id),
            student_id=str(order.student_id),
            item=command.item_name,
            size=command.size,
        )
        return {
            "order_id": str(order.id),
            "converted": True,
            "student_id": str(order.student_id),
            "inventory_updates": inventory_updates,
        }
