"""Stock events that trigger restock processing.

A replenished variant only marks the matching pre-orders; each pre-order then
converts in reaction to its own ``PreOrderRestocked`` event, so every
conversion commits or fails on its own.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from uniforms.domain import uniforms
from uniforms.item.events import StockReplenished
from uniforms.item.item import Item
from uniforms.order.events import PreOrderRestocked
from uniforms.order.order import Order
from uniforms.restock.notifier import convert_and_notify, find_matching_pre_orders

logger = structlog.get_logger(__name__)


@uniforms.event_handler(part_of=Item)
class StockReplenishedHandler:
    @handle(StockReplenished)
    def on_stock_replenished(self, event: StockReplenished) -> None:
        matches = find_matching_pre_orders(event.name, event.education_level, event.size)
        logger.info(
            "Variant back in stock",
            item=event.name,
            education_level=event.education_level,
            size=event.size,
            new_stock=event.new_stock,
            matched=len(matches),
        )

        repo = current_domain.repository_for(Order)
        for match, line in matches:
            order = repo.get(match.id)
            order.mark_restocked(line)
            repo.add(order)


@uniforms.event_handler(part_of=Order)
class PreOrderRestockedHandler:
    @handle(PreOrderRestocked)
    def on_pre_order_restocked(self, event: PreOrderRestocked) -> None:
        item = {"name": event.item_name, "size": event.size, "quantity": event.quantity}
        convert_and_notify(event.order_id, event.student_id, item)
