"""Inventory status — per-item stock level and status for the custodian's dashboard."""

from datetime import UTC, datetime

from protean.core.projector import on
from protean.fields import Boolean, DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from uniforms.domain import uniforms
from uniforms.item.events import (
    ItemCatalogued,
    ItemDeactivated,
    PurchaseRecorded,
    ReorderPointChanged,
    StockReleased,
    StockReserved,
)
from uniforms.item.item import Item


@uniforms.projection
class InventoryStatus:
    item_id = Identifier(identifier=True, required=True)
    name = String(required=True)
    education_level = String()
    stock = Integer(default=0)
    reorder_point = Integer(default=0)
    status = String()
    is_active = Boolean(default=True)
    updated_at = DateTime()


@uniforms.projector(projector_for=InventoryStatus, aggregates=[Item])
class InventoryStatusProjector:
    @on(ItemCatalogued)
    def on_item_catalogued(self, event):
        current_domain.repository_for(InventoryStatus).add(
            InventoryStatus(
                item_id=event.item_id,
                name=event.name,
                education_level=event.education_level,
                stock=event.stock,
                reorder_point=event.reorder_point or 0,
                status=event.status,
                updated_at=event.created_at,
            )
        )

    def _update(self, item_id, **changes):
        repo = current_domain.repository_for(InventoryStatus)
        record = repo.get(item_id)
        for field_name, value in changes.items():
            setattr(record, field_name, value)
        record.updated_at = datetime.now(UTC)
        repo.add(record)

    @on(StockReserved)
    def on_stock_reserved(self, event):
        self._update(event.item_id, stock=event.item_stock, status=event.status)

    @on(StockReleased)
    def on_stock_released(self, event):
        self._update(event.item_id, stock=event.item_stock, status=event.status)

    @on(PurchaseRecorded)
    def on_purchase_recorded(self, event):
        self._update(event.item_id, stock=event.item_stock, status=event.status)

    @on(ReorderPointChanged)
    def on_reorder_point_changed(self, event):
        self._update(event.item_id, reorder_point=event.reorder_point, stock=event.item_stock, status=event.status)

    @on(ItemDeactivated)
    def on_item_deactivated(self, event):
        self._update(event.item_id, is_active=False)
