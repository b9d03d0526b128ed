"""Stock purchasing — record bought-in stock and roll inventory cycles.

The beginning-inventory rollover runs inside the same command as a purchase
and before it, so a reset can never overwrite stock added by a purchase in
flight.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from uniforms.domain import uniforms
from uniforms.item.item import Item

logger = structlog.get_logger(__name__)


@uniforms.command(part_of="Item")
class AddPurchase:
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    size = String(max_length=50)
    unit_price = Float()


@uniforms.command(part_of="Item")
class ResetBeginningInventory:
    """Roll every active item whose inventory cycle has lapsed."""

    as_of = DateTime()  # Optional: defaults to now


@uniforms.command_handler(part_of=Item)
class PurchasingHandler:
    @handle(AddPurchase)
    def add_purchase(self, command):
        repo = current_domain.repository_for(Item)
        item = repo.get(command.item_id)

        if item.reset_beginning_inventory_if_expired():
            logger.info("Beginning inventory rolled over", item_id=str(item.id))

        movement = item.add_purchase(command.quantity, size=command.size, unit_price=command.unit_price)
        repo.add(item)

        logger.info(
            "Purchase recorded",
            item_id=str(item.id),
            size=movement["size"],
            quantity=command.quantity,
            item_stock=item.stock,
        )
        return movement

    @handle(ResetBeginningInventory)
    def reset_beginning_inventory(self, command):
        as_of = command.as_of or datetime.now(UTC)
        repo = current_domain.repository_for(Item)

        reset_ids = []
        for candidate in repo._dao.query.filter(is_active=True).all().items:
            item = repo.get(candidate.id)
            if item.reset_beginning_inventory_if_expired(as_of):
                repo.add(item)
                reset_ids.append(str(item.id))

        logger.info("Beginning inventory sweep complete", reset_count=len(reset_ids))
        return reset_ids
