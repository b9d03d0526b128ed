"""Order status transitions, including cancellation and stock restoration."""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from uniforms.domain import uniforms
from uniforms.item.store import VariantStore
from uniforms.order.order import Order, OrderStatus
from uniforms.student.strikes import record_strike

logger = structlog.get_logger(__name__)


@uniforms.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    note = Text()
    voided = Boolean(default=False)  # Set only by the auto-void sweep


@uniforms.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status

        order.change_status(command.status, note=command.note, voided=bool(command.voided))

        inventory_updates = []
        cancelled = order.status == OrderStatus.CANCELLED.value
        if cancelled and not order.is_pre_order:
            store = VariantStore()
            inventory_updates = store.release_lines(order.items, order.education_level)
            store.save()

        repo.add(order)

        if cancelled and command.voided:
            record_strike(order.student_id, order.student_email, order_id=order.id)

        logger.info(
            "Order status updated",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.status,
            voided=bool(command.voided),
        )
        return {
            "order_id": str(order.id),
            "status": order.status,
            "inventory_updates": inventory_updates,
        }
