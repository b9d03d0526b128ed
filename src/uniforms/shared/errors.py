"""Admission errors raised when an order cannot be accepted.

All of them subclass Protean's ``ValidationError`` so that a rejected
``PlaceOrder`` rolls back its unit of work like any other invalid command,
while still carrying the figures a client needs to explain the rejection.
"""

from protean.exceptions import ValidationError


class AdmissionRejected(ValidationError):
    """Base class for Limit Engine rejections."""

    reason = "admission_rejected"

    def details(self) -> dict:
        return {}


class NotEligible(AdmissionRejected):
    """The student has no usable item limit (unset, unknown cohort or blocked)."""

    reason = "not_eligible"

    def __init__(self, message: str, item_limit: int | None = None):
        self.item_limit = item_limit
        super().__init__({"total_item_limit": [message]})

    def details(self) -> dict:
        return {"item_limit": self.item_limit}


class SlotLimitExceeded(AdmissionRejected):
    reason = "slot_limit_exceeded"

    def __init__(self, slots_left: int, slots_used: int, requested_slots: int, item_limit: int):
        self.slots_left = slots_left
        self.slots_used = slots_used
        self.requested_slots = requested_slots
        self.item_limit = item_limit
        super().__init__(
            {
                "items": [
                    f"Order needs {requested_slots} item slot(s) but only {slots_left} "
                    f"of {item_limit} remain"
                ]
            }
        )

    def details(self) -> dict:
        return {
            "slots_left": self.slots_left,
            "slots_used": self.slots_used,
            "requested_slots": self.requested_slots,
            "item_limit": self.item_limit,
        }


class LockedOut(AdmissionRejected):
    reason = "locked_out"

    def __init__(self, unlock_at, lockout_period: int, lockout_unit: str):
        self.unlock_at = unlock_at
        self.lockout_period = lockout_period
        self.lockout_unit = lockout_unit
        super().__init__(
            {"order": [f"Ordering is locked until {unlock_at.date().isoformat()} after a full-allowance order"]}
        )

    def details(self) -> dict:
        return {
            "unlock_at": self.unlock_at.isoformat(),
            "lockout_period": self.lockout_period,
            "lockout_unit": self.lockout_unit,
        }


class PerItemLimitExceeded(AdmissionRejected):
    reason = "per_item_limit_exceeded"

    def __init__(self, item: str, already_ordered: int, requested: int, maximum: int):
        self.item = item
        self.already_ordered = already_ordered
        self.requested = requested
        self.maximum = maximum
        super().__init__(
            {
                "items": [
                    f"{item}: {already_ordered} already ordered, {requested} requested, maximum is {maximum}"
                ]
            }
        )

    def details(self) -> dict:
        return {
            "item": self.item,
            "already_ordered": self.already_ordered,
            "requested": self.requested,
            "maximum": self.maximum,
        }
