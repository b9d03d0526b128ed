"""Order aggregate (CQRS) — a student's uniform order and its lifecycle.

Lines are snapshots of what was ordered (name, size, quantity, price) at
placement time. Status moves through a fixed state machine; cancellation is
terminal and only possible before the order is claimed. The QR receipt
payload is regenerated whenever status or content changes.
"""

import json
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from uniforms.domain import uniforms
from uniforms.order.events import (
    InventoryMismatchRecorded,
    OrderCancelled,
    OrderConfirmedByStudent,
    OrderDeactivated,
    OrderPlaced,
    OrderStatusChanged,
    PreOrderConverted,
    PreOrderRestocked,
)
from uniforms.order.receipt import encode_receipt
from uniforms.shared.sizes import sizes_equivalent


class OrderStatus(Enum):
    PENDING = "pending"
    PAYMENT_PENDING = "payment_pending"
    PROCESSING = "processing"
    PAID = "paid"
    READY = "ready"
    CLAIMED = "claimed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderType(Enum):
    REGULAR = "regular"
    PRE_ORDER = "pre-order"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {
        OrderStatus.PAYMENT_PENDING,
        OrderStatus.PROCESSING,
        OrderStatus.PAID,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PAYMENT_PENDING: {
        OrderStatus.PAID,
        OrderStatus.PROCESSING,
        OrderStatus.READY,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PROCESSING: {OrderStatus.PAID, OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.PROCESSING, OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.CLAIMED, OrderStatus.CANCELLED},
    OrderStatus.CLAIMED: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# Statuses a restocked pre-order may be converted from
CONVERTIBLE_STATUSES = {OrderStatus.PENDING, OrderStatus.PROCESSING, OrderStatus.PAYMENT_PENDING}

# Statuses the auto-void sweep treats as "placed but not yet claimed"
CLAIMABLE_STATUSES = {
    OrderStatus.PENDING,
    OrderStatus.PAYMENT_PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.READY,
    OrderStatus.PAID,
}


def generate_order_number(now=None) -> str:
    now = now or datetime.now(UTC)
    return f"ORD-{now:%Y%m%d}-{uuid4().hex[:6].upper()}"


@uniforms.entity(part_of="Order")
class OrderLine:
    name = String(required=True, max_length=255)
    size = String(max_length=50)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(default=0.0)
    education_level = String(max_length=100)


@uniforms.aggregate
class Order:
    order_number = String(required=True, max_length=50)
    student_id = Identifier(required=True)
    student_email = String(required=True, max_length=255)
    student_name = String(required=True, max_length=255)
    education_level = String(required=True, max_length=100)
    order_type = String(choices=OrderType, default=OrderType.REGULAR.value)
    items = HasMany(OrderLine)
    total_amount = Float(default=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    notes = Text()
    receipt_data = Text()
    student_confirmed_at = DateTime()
    payment_date = DateTime()
    claimed_date = DateTime()
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        student_id,
        student_email,
        student_name,
        education_level,
        lines,
        order_type=OrderType.REGULAR.value,
        order_number=None,
        total_amount=None,
        now=None,
    ):
        """Create a pending order from ``lines`` (dicts with name, size, quantity, unit_price)."""
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = now or datetime.now(UTC)
        order_lines = [
            OrderLine(
                name=line["name"].strip(),
                size=line.get("size") or None,
                quantity=line.get("quantity") or 1,
                unit_price=line.get("unit_price") or 0.0,
                education_level=line.get("education_level") or education_level,
            )
            for line in lines
        ]
        if total_amount is None:
            total_amount = round(sum(line.quantity * (line.unit_price or 0.0) for line in order_lines), 2)

        order = cls(
            order_number=order_number or generate_order_number(now),
            student_id=student_id,
            student_email=student_email.strip().lower(),
            student_name=student_name,
            education_level=education_level,
            order_type=order_type or OrderType.REGULAR.value,
            items=order_lines,
            total_amount=total_amount,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        order.receipt_data = encode_receipt(order)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                student_id=str(student_id),
                order_type=order.order_type,
                status=order.status,
                education_level=education_level,
                total_amount=total_amount,
                item_count=sum(line.quantity for line in order_lines),
                items=json.dumps(
                    [{"name": line.name, "size": line.size, "quantity": line.quantity} for line in order_lines]
                ),
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_pre_order(self) -> bool:
        return self.order_type == OrderType.PRE_ORDER.value

    @property
    def is_claimable(self) -> bool:
        return OrderStatus(self.status) in CLAIMABLE_STATUSES

    def line_matching(self, item_name, size=None):
        """The line for ``item_name`` (case-insensitive) whose size is equivalent to ``size``."""
        wanted = " ".join((item_name or "").lower().split())
        for line in self.items:
            if " ".join(line.name.lower().split()) != wanted:
                continue
            if size is None or sizes_equivalent(line.size, size):
                return line
        return None

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _refresh_receipt(self):
        self.receipt_data = encode_receipt(self)

    def change_status(self, new_status, note=None, voided=False, now=None):
        """Move the order to ``new_status``, stamping payment and claim dates."""
        target = OrderStatus(new_status)
        self._assert_can_transition(target)

        now = now or datetime.now(UTC)
        previous = self.status
        self.status = target.value
        self.updated_at = now

        if target == OrderStatus.PAID:
            self.payment_date = now
        elif target == OrderStatus.CLAIMED:
            self.claimed_date = now
        elif target == OrderStatus.CANCELLED and note:
            self.notes = note

        self._refresh_receipt()

        if target == OrderStatus.CANCELLED:
            self.raise_(
                OrderCancelled(
                    order_id=str(self.id),
                    order_number=self.order_number,
                    student_id=str(self.student_id),
                    previous_status=previous,
                    order_type=self.order_type,
                    note=note,
                    voided=voided,
                    cancelled_at=now,
                )
            )
        else:
            self.raise_(
                OrderStatusChanged(
                    order_id=str(self.id),
                    student_id=str(self.student_id),
                    previous_status=previous,
                    new_status=target.value,
                    changed_at=now,
                )
            )

    def confirm_by_student(self, student_id=None, email=None, now=None):
        """The owning student acknowledges the order while it is still pending."""
        owns = (student_id and str(student_id) == str(self.student_id)) or (
            email and email.strip().lower() == (self.student_email or "").lower()
        )
        if not owns:
            raise ValidationError({"student": ["Only the student who placed the order can confirm it"]})
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise ValidationError({"status": ["Only pending orders can be confirmed"]})
        if self.student_confirmed_at is not None:
            raise ValidationError({"student_confirmed_at": ["Order is already confirmed"]})

        now = now or datetime.now(UTC)
        self.student_confirmed_at = now
        self.updated_at = now
        self.raise_(
            OrderConfirmedByStudent(
                order_id=str(self.id),
                student_id=str(self.student_id),
                confirmed_at=now,
            )
        )

    def convert_to_regular(self, item_name, size=None, now=None):
        """Turn a restocked pre-order into a regular pending order."""
        now = now or datetime.now(UTC)
        self.order_type = OrderType.REGULAR.value
        self.status = OrderStatus.PENDING.value
        self.updated_at = now
        self._refresh_receipt()
        self.raise_(
            PreOrderConverted(
                order_id=str(self.id),
                student_id=str(self.student_id),
                item_name=item_name,
                size=size,
                converted_at=now,
            )
        )

    def mark_restocked(self, line, now=None):
        """Announce that stock arrived for one of this pre-order's lines."""
        self.raise_(
            PreOrderRestocked(
                order_id=str(self.id),
                student_id=str(self.student_id),
                item_name=line.name,
                size=line.size,
                quantity=line.quantity,
                restocked_at=now or datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # Bookkeeping
    # -------------------------------------------------------------------
    def record_inventory_mismatch(self, failures, now=None):
        now = now or datetime.now(UTC)
        self.raise_(
            InventoryMismatchRecorded(
                order_id=str(self.id),
                order_number=self.order_number,
                failures=json.dumps(failures),
                recorded_at=now,
            )
        )

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"is_active": ["Order is already deleted"]})
        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(OrderDeactivated(order_id=str(self.id), student_id=str(self.student_id)))
