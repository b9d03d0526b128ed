"""Inventory mismatches — order lines that could not be reserved, for reconciliation."""

import json

from protean.core.projector import on
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from uniforms.domain import uniforms
from uniforms.order.events import InventoryMismatchRecorded
from uniforms.order.order import Order


@uniforms.projection
class InventoryMismatch:
    order_id = Identifier(identifier=True, required=True)
    order_number = String(required=True)
    failure_count = Integer(default=0)
    failures = Text()  # JSON array of failed stock movements
    recorded_at = DateTime()


@uniforms.projector(projector_for=InventoryMismatch, aggregates=[Order])
class InventoryMismatchProjector:
    @on(InventoryMismatchRecorded)
    def on_inventory_mismatch_recorded(self, event):
        current_domain.repository_for(InventoryMismatch).add(
            InventoryMismatch(
                order_id=event.order_id,
                order_number=event.order_number,
                failure_count=len(json.loads(event.failures)),
                failures=event.failures,
                recorded_at=event.recorded_at,
            )
        )
