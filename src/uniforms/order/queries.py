"""Read helpers over the Order repository."""

from protean.utils.globals import current_domain

from uniforms.item.store import cohort_matches
from uniforms.limits.engine import PlacedOrder
from uniforms.order.order import CONVERTIBLE_STATUSES, Order, OrderType


def active_orders() -> list[Order]:
    return current_domain.repository_for(Order)._dao.query.filter(is_active=True).all().items


def orders_for_student(student_id, email=None) -> list[Order]:
    """Active orders placed by the student, matched by id or email."""
    email = (email or "").strip().lower()
    return [
        order
        for order in active_orders()
        if str(order.student_id) == str(student_id) or (email and order.student_email == email)
    ]


def placed_orders_for_student(student_id, email=None) -> list[PlacedOrder]:
    return [PlacedOrder.from_order(order) for order in orders_for_student(student_id, email)]


def order_number_taken(order_number) -> bool:
    repo = current_domain.repository_for(Order)
    return bool(repo._dao.query.filter(order_number=order_number).all().items)


def awaiting_pre_orders() -> list[Order]:
    """Active pre-orders that a restock could still convert."""
    convertible = {status.value for status in CONVERTIBLE_STATUSES}
    return [
        order
        for order in active_orders()
        if order.order_type == OrderType.PRE_ORDER.value and order.status in convertible
    ]


def pre_order_count(item_name, education_level=None) -> int:
    """Units of ``item_name`` waiting on open pre-orders."""
    wanted = " ".join((item_name or "").lower().split())
    total = 0
    for order in awaiting_pre_orders():
        for line in order.items:
            if " ".join(line.name.lower().split()) != wanted:
                continue
            if education_level and not cohort_matches(education_level, line.education_level or order.education_level):
                continue
            total += line.quantity
    return total


def unclaimed_orders() -> list[Order]:
    """Active orders still waiting to be claimed."""
    return [order for order in active_orders() if order.is_claimable]
