"""Limit Engine — pure admission decision for a student's candidate order.

Nothing here touches persistence: callers load the student profile and the
student's placed orders, snapshot them into ``PlacedOrder`` values and ask
``evaluate`` whether the candidate items may be ordered. Rejections are raised
as ``AdmissionRejected`` subclasses; acceptance returns an
``AdmissionDecision`` with the figures shown to the student.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, datetime

from uniforms.limits.segments import GENDERS, max_quantities_for_student, max_quantity_for_item, resolve_item_key
from uniforms.shared.clock import add_months, as_utc
from uniforms.shared.errors import LockedOut, NotEligible, PerItemLimitExceeded, SlotLimitExceeded
from uniforms.shared.policy import LimitPolicy

# Orders in these statuses occupy item slots
SLOT_STATUSES = frozenset({"pending", "paid", "claimed", "processing", "ready", "payment_pending", "completed"})

# Orders in these statuses count toward per-item quantities (claimed and completed free the allowance)
OPEN_STATUSES = frozenset({"pending", "paid", "processing", "ready", "payment_pending"})


@dataclass(frozen=True)
class PlacedOrder:
    """Snapshot of an existing order as the Limit Engine sees it."""

    status: str
    created_at: datetime
    lines: tuple[tuple[str, int], ...] = ()

    @classmethod
    def from_order(cls, order) -> "PlacedOrder":
        return cls(
            status=order.status,
            created_at=as_utc(order.created_at),
            lines=tuple((line.name, line.quantity) for line in order.items),
        )

    @property
    def slot_keys(self) -> set[str]:
        return slot_keys(name for name, _ in self.lines)


@dataclass(frozen=True)
class AdmissionDecision:
    item_limit: int
    slots_used_from_placed_orders: int
    slots_left_for_this_order: int
    requested_slots: int
    profile_incomplete: bool = False
    item_maxima: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "item_limit": self.item_limit,
            "slots_used_from_placed_orders": self.slots_used_from_placed_orders,
            "slots_left_for_this_order": self.slots_left_for_this_order,
            "requested_slots": self.requested_slots,
            "profile_incomplete": self.profile_incomplete,
        }


def slot_keys(names) -> set[str]:
    return {key for key in (resolve_item_key(name) for name in names) if key}


def effective_item_limit(profile, policy: LimitPolicy) -> int | None:
    """Explicit override wins; ``None`` falls back to the cohort default."""
    if profile.total_item_limit is not None:
        return profile.total_item_limit
    return policy.cohort_default((profile.student_type or "").lower() or None)


def slots_used(placed_orders, since: datetime | None = None) -> int:
    since = as_utc(since)
    used = set()
    for order in placed_orders:
        if order.status not in SLOT_STATUSES:
            continue
        if since is not None and as_utc(order.created_at) < since:
            continue
        used |= order.slot_keys
    return len(used)


def lockout_months(period: int, unit: str | None, policy: LimitPolicy) -> int:
    if unit == "academic_years":
        return period * policy.months_per_academic_year
    return period


def lockout_end(profile, placed_orders, item_limit: int, policy: LimitPolicy) -> datetime | None:
    """When the student may order again, or ``None`` if no lockout applies.

    Only the most recent placed order is inspected, and it locks the student
    out only if it used the whole item allowance on its own.
    """
    period = profile.order_lockout_period or 0
    if period <= 0 or item_limit <= 0:
        return None

    placed = [order for order in placed_orders if order.status in SLOT_STATUSES]
    if not placed:
        return None

    latest = max(placed, key=lambda order: as_utc(order.created_at))
    if len(latest.slot_keys) < item_limit:
        return None

    return add_months(as_utc(latest.created_at), lockout_months(period, profile.order_lockout_unit, policy))


def per_item_maximum(item_name: str, profile, policy: LimitPolicy) -> tuple[int, bool]:
    """Segment maximum for ``item_name`` and whether the profile was incomplete.

    With no gender on file the larger of both genders' maxima applies.
    """
    if profile.gender:
        maximum = max_quantity_for_item(
            item_name,
            profile.education_level,
            profile.student_type,
            profile.gender,
            default_max=policy.default_item_max,
        )
        return maximum, False

    maximum = max(
        max_quantity_for_item(
            item_name,
            profile.education_level,
            profile.student_type,
            gender,
            default_max=policy.default_item_max,
        )
        for gender in GENDERS
    )
    return maximum, True


def _quantities_by_key(lines) -> Counter:
    quantities = Counter()
    for name, quantity in lines:
        key = resolve_item_key(name)
        if key:
            quantities[key] += quantity or 0
    return quantities


def evaluate(profile, candidate_items, placed_orders, policy: LimitPolicy | None = None, now=None) -> AdmissionDecision:
    """Decide whether ``candidate_items`` may be ordered by the student.

    ``candidate_items`` is an iterable of ``(name, quantity)`` pairs and
    ``placed_orders`` an iterable of ``PlacedOrder`` snapshots.
    """
    policy = policy or LimitPolicy()
    now = as_utc(now) or datetime.now(UTC)
    candidate_items = list(candidate_items)
    placed_orders = list(placed_orders)

    item_limit = effective_item_limit(profile, policy)
    if item_limit is None:
        raise NotEligible("No item limit is configured for this student")
    if item_limit <= 0:
        raise NotEligible("This student is not allowed to place orders", item_limit=item_limit)

    # Slots
    requested_slots = len(slot_keys(name for name, _ in candidate_items))
    used = slots_used(placed_orders, since=profile.total_item_limit_set_at)
    slots_left = max(0, item_limit - used)
    if requested_slots > slots_left:
        raise SlotLimitExceeded(slots_left, used, requested_slots, item_limit)

    # Lockout
    unlock_at = lockout_end(profile, placed_orders, item_limit, policy)
    if unlock_at is not None and now < unlock_at:
        raise LockedOut(unlock_at, profile.order_lockout_period, profile.order_lockout_unit)

    # Per-item quantities
    already = _quantities_by_key(
        line for order in placed_orders if order.status in OPEN_STATUSES for line in order.lines
    )
    requested = _quantities_by_key(candidate_items)
    names = {resolve_item_key(name): name for name, _ in candidate_items}

    profile_incomplete = False
    maxima = {}
    for key, quantity in requested.items():
        maximum, incomplete = per_item_maximum(names[key], profile, policy)
        profile_incomplete = profile_incomplete or incomplete
        maxima[key] = maximum
        if already[key] + quantity > maximum:
            raise PerItemLimitExceeded(names[key], already[key], quantity, maximum)

    return AdmissionDecision(
        item_limit=item_limit,
        slots_used_from_placed_orders=used,
        slots_left_for_this_order=slots_left,
        requested_slots=requested_slots,
        profile_incomplete=profile_incomplete,
        item_maxima=maxima,
    )


def summarize(profile, placed_orders, policy: LimitPolicy | None = None, now=None) -> dict:
    """Read-only eligibility summary for a student (what they may still order)."""
    policy = policy or LimitPolicy()
    now = as_utc(now) or datetime.now(UTC)
    placed_orders = list(placed_orders)

    item_limit = effective_item_limit(profile, policy)
    used = slots_used(placed_orders, since=profile.total_item_limit_set_at)
    unlock_at = lockout_end(profile, placed_orders, item_limit or 0, policy)

    if profile.gender:
        maxima = max_quantities_for_student(profile.education_level, profile.student_type, profile.gender)
    else:
        maxima = {}
        for gender in GENDERS:
            for key, value in max_quantities_for_student(profile.education_level, profile.student_type, gender).items():
                maxima[key] = max(value, maxima.get(key, 0))

    return {
        "item_limit": item_limit,
        "eligible": item_limit is not None and item_limit > 0,
        "slots_used": used,
        "slots_left": max(0, (item_limit or 0) - used),
        "locked_until": unlock_at.isoformat() if unlock_at and now < unlock_at else None,
        "profile_incomplete": not profile.gender,
        "max_quantities": maxima,
    }
