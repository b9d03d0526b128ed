"""Domain events for the Order aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from uniforms.domain import uniforms


@uniforms.event(part_of="Order")
class OrderPlaced:
    """A student placed an order (regular or pre-order)."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    student_id = Identifier(required=True)
    order_type = String(required=True)
    status = String(required=True)
    education_level = String()
    total_amount = Float()
    item_count = Integer()
    items = Text()  # JSON array of line snapshots
    created_at = DateTime(required=True)


@uniforms.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    student_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@uniforms.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled, manually or by the auto-void sweep."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String()
    student_id = Identifier(required=True)
    previous_status = String(required=True)
    order_type = String()
    note = Text()
    voided = Boolean(default=False)
    cancelled_at = DateTime(required=True)


@uniforms.event(part_of="Order")
class OrderConfirmedByStudent:
    __version__ = 1

    order_id = Identifier(required=True)
    student_id = Identifier(required=True)
    confirmed_at = DateTime(required=True)


@uniforms.event(part_of="Order")
class PreOrderConverted:
    """A restock let a pre-order become a regular order."""

    __version__ = 1

    order_id = Identifier(required=True)
    student_id = Identifier(required=True)
    item_name = String(required=True)
    size = String()
    converted_at = DateTime(required=True)


@uniforms.event(part_of="Order")
class InventoryMismatchRecorded:
    """Some lines of a placed order could not be reserved against stock."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    failures = Text(required=True)  # JSON array of failed stock movements
    recorded_at = DateTime(required=True)


@uniforms.event(part_of="Order")
class OrderDeactivated:
    __version__ = 1

    order_id = Identifier(required=True)
    student_id = Identifier(required=True)


@uniforms.event(part_of="Order")
class PreOrderRestocked:
    """Stock arrived for a line of a waiting pre-order; conversion follows."""

    __version__ = 1

    order_id = Identifier(required=True)
    student_id = Identifier(required=True)
    item_name = String(required=True)
    size = String()
    quantity = Integer()
    restocked_at = DateTime(required=True)
