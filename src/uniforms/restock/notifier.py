"""Restock Notifier — convert waiting pre-orders when a size is back in stock.

``process_restock`` finds every open pre-order with a line for the restocked
item (name, cohort and alias-aware size), converts each one through
``ConvertPreOrder`` and tells the student through the notification channel.
Each conversion is its own top-level command with its own unit of work: one
failure never stops or undoes the others.
"""

import structlog
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from uniforms.channel import get_channel
from uniforms.item.store import cohort_matches
from uniforms.order.conversion import ConvertPreOrder
from uniforms.order.order import Order
from uniforms.order.queries import awaiting_pre_orders
from uniforms.shared.sizes import sizes_equivalent

logger = structlog.get_logger(__name__)


def find_matching_pre_orders(item_name, education_level, size=None) -> list[tuple[Order, object]]:
    """Open pre-orders with a line for the restocked item, paired with that line."""
    wanted = " ".join((item_name or "").lower().split())
    matches = []
    for order in awaiting_pre_orders():
        for line in order.items:
            if " ".join(line.name.lower().split()) != wanted:
                continue
            if not cohort_matches(education_level, line.education_level or order.education_level):
                continue
            if size is not None and not sizes_equivalent(line.size, size):
                continue
            matches.append((order, line))
            break
    return matches


def notify(student_id, event, order_id, item) -> bool:
    """Hand a notice to the channel; delivery problems are logged, never raised."""
    try:
        result = get_channel().send(student_id=student_id, event=event, order_id=order_id, item=item)
    except Exception as exc:
        logger.error("Restock notification failed", student_id=student_id, order_id=order_id, error=str(exc))
        return False

    if result.get("status") != "sent":
        logger.error(
            "Restock notification failed",
            student_id=student_id,
            order_id=order_id,
            error=result.get("error"),
        )
        return False
    return True


def convert_and_notify(order_id, student_id, item) -> dict:
    """Convert one pre-order and tell its student.

    ``item`` is the restocked line (name, size, quantity). The result carries
    ``outcome``: ``converted``, ``skipped`` (the order no longer qualifies) or
    ``failed``.
    """
    order_id, student_id = str(order_id), str(student_id)
    try:
        result = current_domain.process(
            ConvertPreOrder(order_id=order_id, item_name=item["name"], size=item.get("size")),
            asynchronous=False,
        )
    except (ValidationError, InvalidOperationError, ObjectNotFoundError) as exc:
        logger.warning("Failed to convert pre-order", order_id=order_id, error=str(exc))
        return {"outcome": "failed", "order_id": order_id, "error": str(exc)}

    if result.get("converted"):
        notify(student_id, "converted", order_id, item)
        return {"outcome": "converted", **result}

    notify(student_id, "restocked", order_id, item)
    return {"outcome": "skipped", **result}


def process_restock(item_name, education_level, size=None) -> dict:
    """Convert and notify every pre-order waiting on the restocked item."""
    matches = find_matching_pre_orders(item_name, education_level, size)
    logger.info(
        "Processing restock",
        item=item_name,
        education_level=education_level,
        size=size,
        matched=len(matches),
    )

    converted, skipped, failed = [], [], []
    for order, line in matches:
        item = {"name": line.name, "size": line.size, "quantity": line.quantity}
        result = convert_and_notify(order.id, order.student_id, item)
        outcome = result.pop("outcome")
        if outcome == "converted":
            converted.append(result["order_id"])
        elif outcome == "skipped":
            skipped.append(result)
        else:
            failed.append(result)

    logger.info(
        "Restock processing complete",
        item=item_name,
        converted_count=len(converted),
        failed_count=len(failed),
    )
    return {
        "matched": len(matches),
        "converted": converted,
        "skipped": skipped,
        "failed": failed,
    }
