"""Order placement — admission control, persistence and stock reservation.

Regular orders pass through the Limit Engine before anything is written, then
reserve stock line by line. A line that cannot be reserved (unknown item or
size) does not fail the order: it is reported in ``inventory_updates`` and
recorded on the order for reconciliation. Pre-orders skip both steps; they
reserve stock when a restock converts them.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from uniforms.domain import uniforms
from uniforms.item.store import VariantStore
from uniforms.limits.engine import evaluate
from uniforms.order.order import Order, OrderType
from uniforms.order.queries import order_number_taken, placed_orders_for_student
from uniforms.shared.errors import AdmissionRejected, NotEligible
from uniforms.shared.policy import LimitPolicy
from uniforms.student.strikes import find_profile

logger = structlog.get_logger(__name__)


@uniforms.command(part_of="Order")
class PlaceOrder:
    student_id = Identifier(required=True)
    student_email = String(required=True, max_length=255)
    student_name = String(required=True, max_length=255)
    education_level = String(required=True, max_length=100)
    items = Text(required=True)  # JSON array of {name, size, quantity, unit_price}
    order_type = String(choices=OrderType, default=OrderType.REGULAR.value)
    order_number = String(max_length=50)
    total_amount = Float()


def _parse_lines(raw) -> list[dict]:
    try:
        lines = json.loads(raw) if raw else []
    except json.JSONDecodeError as exc:
        raise ValidationError({"items": ["Items must be a JSON array"]}) from exc

    if not isinstance(lines, list) or not lines:
        raise ValidationError({"items": ["An order needs at least one item"]})

    for line in lines:
        if not isinstance(line, dict) or not (line.get("name") or "").strip():
            raise ValidationError({"items": ["Every item needs a name"]})
        quantity = line.get("quantity", 1)
        if not isinstance(quantity, int) or quantity < 1:
            raise ValidationError({"items": [f"Invalid quantity for {line['name']}"]})
    return lines


def admit(command, lines, policy=None):
    """Run the Limit Engine for a regular order; raises on rejection."""
    try:
        profile = find_profile(command.student_id, command.student_email)
    except ObjectNotFoundError as exc:
        raise NotEligible("No student profile is on file for this student") from exc

    placed = placed_orders_for_student(profile.student_id, profile.email)
    return evaluate(
        profile,
        [(line["name"], line.get("quantity", 1)) for line in lines],
        placed,
        policy=policy or LimitPolicy.from_env(),
    )


@uniforms.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = _parse_lines(command.items)
        if command.order_number and order_number_taken(command.order_number):
            raise ValidationError({"order_number": ["Order number is already in use"]})

        order_type = command.order_type or OrderType.REGULAR.value
        decision = None
        if order_type != OrderType.PRE_ORDER.value:
            try:
                decision = admit(command, lines)
            except AdmissionRejected as exc:
                logger.info(
                    "Order rejected by admission control",
                    student_id=str(command.student_id),
                    reason=exc.reason,
                    **exc.details(),
                )
                raise

        order = Order.place(
            student_id=command.student_id,
            student_email=command.student_email,
            student_name=command.student_name,
            education_level=command.education_level,
            lines=lines,
            order_type=order_type,
            order_number=command.order_number,
            total_amount=command.total_amount,
        )

        inventory_updates = []
        if not order.is_pre_order:
            store = VariantStore()
            inventory_updates = store.reserve_lines(order.items, order.education_level)
            store.save()

            failures = [update for update in inventory_updates if not update["success"]]
            if failures:
                order.record_inventory_mismatch(failures)

        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            student_id=str(order.student_id),
            order_type=order.order_type,
            line_count=len(order.items),
        )
        return {
            "order_id": str(order.id),
            "order_number": order.order_number,
            "order_type": order.order_type,
            "status": order.status,
            "inventory_updates": inventory_updates,
            "admission": decision.to_dict() if decision else None,
        }
