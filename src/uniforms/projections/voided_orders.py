"""Voided orders — audit trail of orders cancelled by the auto-void sweep."""

from protean.core.projector import on
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from uniforms.domain import uniforms
from uniforms.order.events import OrderCancelled
from uniforms.order.order import Order


@uniforms.projection
class VoidedOrder:
    order_id = Identifier(identifier=True, required=True)
    order_number = String()
    student_id = Identifier(required=True)
    previous_status = String()
    note = Text()
    voided_at = DateTime()


@uniforms.projector(projector_for=VoidedOrder, aggregates=[Order])
class VoidedOrderProjector:
    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        if not event.voided:
            return

        current_domain.repository_for(VoidedOrder).add(
            VoidedOrder(
                order_id=event.order_id,
                order_number=event.order_number,
                student_id=event.student_id,
                previous_status=event.previous_status,
                note=event.note,
                voided_at=event.cancelled_at,
            )
        )
