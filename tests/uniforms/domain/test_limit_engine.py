"""Tests for the Limit Engine admission decision.

Covers:
- Slot counting across placed orders, and the limit set-at boundary
- Cohort defaults, blocked and unconfigured students
- Lockout after a full-allowance order
- Per-item maximum quantities and incomplete profiles
"""

from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import pytest
from uniforms.limits.engine import (
    PlacedOrder,
    effective_item_limit,
    evaluate,
    lockout_end,
    slots_used,
    summarize,
)
from uniforms.shared.errors import LockedOut, NotEligible, PerItemLimitExceeded, SlotLimitExceeded
from uniforms.shared.policy import LimitPolicy

NOW = datetime(2025, 6, 1, 9, 0, tzinfo=UTC)


def _profile(**overrides):
    defaults = {
        "total_item_limit": 2,
        "total_item_limit_set_at": None,
        "student_type": "new",
        "education_level": "Elementary",
        "gender": "Female",
        "order_lockout_period": None,
        "order_lockout_unit": "months",
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def _placed(*names, status="pending", days_ago=1):
    return PlacedOrder(
        status=status,
        created_at=NOW - timedelta(days=days_ago),
        lines=tuple((name, 1) for name in names),
    )


class TestEffectiveItemLimit:
    def test_explicit_limit_wins(self):
        assert effective_item_limit(_profile(total_item_limit=5), LimitPolicy()) == 5

    def test_new_student_defaults_to_eight(self):
        assert effective_item_limit(_profile(total_item_limit=None, student_type="new"), LimitPolicy()) == 8

    def test_old_student_defaults_to_two(self):
        assert effective_item_limit(_profile(total_item_limit=None, student_type="old"), LimitPolicy()) == 2

    def test_policy_overrides_defaults(self):
        policy = LimitPolicy(new_student_item_limit=4)
        assert effective_item_limit(_profile(total_item_limit=None), policy) == 4


class TestSlotCheck:
    def test_two_distinct_items_within_limit_of_two(self):
        decision = evaluate(_profile(), [("Jersey", 1), ("ID Lace", 1)], [], now=NOW)

        assert decision.requested_slots == 2
        assert decision.slots_left_for_this_order == 2
        assert decision.slots_used_from_placed_orders == 0

    def test_third_item_type_rejected_when_two_slots_used(self):
        placed = [_placed("Jersey", "ID Lace")]

        with pytest.raises(SlotLimitExceeded) as exc:
            evaluate(_profile(), [("Logo Patch", 1)], placed, now=NOW)

        assert exc.value.slots_left == 0
        assert exc.value.slots_used == 2
        assert exc.value.requested_slots == 1

    def test_quantity_within_a_key_uses_one_slot(self):
        decision = evaluate(_profile(total_item_limit=1), [("Logo Patch", 3)], [], now=NOW)
        assert decision.requested_slots == 1

    def test_aliases_share_a_slot(self):
        items = [("Logo Patch", 1), ("Logo Patch - Elementary", 1)]
        decision = evaluate(_profile(total_item_limit=1), items, [], now=NOW)
        assert decision.requested_slots == 1

    def test_cancelled_orders_do_not_use_slots(self):
        placed = [_placed("Jersey", "ID Lace", status="cancelled")]
        decision = evaluate(_profile(), [("Jersey", 1)], placed, now=NOW)
        assert decision.slots_used_from_placed_orders == 0

    def test_only_orders_after_limit_was_set_count(self):
        placed = [_placed("Jersey", "ID Lace", days_ago=10)]
        profile = _profile(total_item_limit_set_at=NOW - timedelta(days=5))

        decision = evaluate(profile, [("Logo Patch", 1)], placed, now=NOW)

        assert decision.slots_used_from_placed_orders == 0

    def test_slots_used_counts_distinct_keys(self):
        placed = [_placed("Jersey"), _placed("PE Jersey", "ID Lace")]
        assert slots_used(placed) == 2


class TestEligibility:
    def test_blocked_student_is_not_eligible(self):
        with pytest.raises(NotEligible):
            evaluate(_profile(total_item_limit=0), [("Jersey", 1)], [], now=NOW)

    def test_negative_limit_is_blocked(self):
        with pytest.raises(NotEligible):
            evaluate(_profile(total_item_limit=-1), [("Jersey", 1)], [], now=NOW)

    def test_unknown_student_type_without_limit_is_not_eligible(self):
        with pytest.raises(NotEligible):
            evaluate(_profile(total_item_limit=None, student_type=None), [("Jersey", 1)], [], now=NOW)


class TestLockout:
    def test_full_allowance_order_locks_for_an_academic_year(self):
        last = _placed("Jersey", "ID Lace", days_ago=30)
        profile = _profile(
            order_lockout_period=1,
            order_lockout_unit="academic_years",
            # Limit re-set after the last order so slots are free again
            total_item_limit_set_at=NOW - timedelta(days=1),
        )

        with pytest.raises(LockedOut) as exc:
            evaluate(profile, [("Logo Patch", 1)], [last], now=NOW)

        assert exc.value.unlock_at == last.created_at.replace(year=2026, month=3)

    def test_lockout_end_in_months(self):
        last = PlacedOrder(status="paid", created_at=datetime(2025, 1, 31, tzinfo=UTC), lines=(("Jersey", 1),))
        profile = _profile(total_item_limit=1, order_lockout_period=1, order_lockout_unit="months")

        assert lockout_end(profile, [last], 1, LimitPolicy()) == datetime(2025, 2, 28, tzinfo=UTC)

    def test_partial_order_does_not_lock(self):
        last = _placed("Jersey", days_ago=2)
        profile = _profile(order_lockout_period=6)

        decision = evaluate(profile, [("ID Lace", 1)], [last], now=NOW)

        assert decision.slots_left_for_this_order == 1

    def test_expired_lockout_allows_ordering(self):
        last = _placed("Jersey", "ID Lace", days_ago=400)
        profile = _profile(
            order_lockout_period=1,
            order_lockout_unit="academic_years",
            total_item_limit_set_at=NOW - timedelta(days=1),
        )

        decision = evaluate(profile, [("Logo Patch", 1)], [last], now=NOW)

        assert decision.item_limit == 2

    def test_only_latest_order_is_inspected(self):
        older_full = _placed("Jersey", "ID Lace", days_ago=60)
        latest_partial = _placed("Jersey", days_ago=10)
        profile = _profile(order_lockout_period=12, total_item_limit_set_at=NOW - timedelta(days=1))

        assert lockout_end(profile, [older_full, latest_partial], 2, LimitPolicy()) is None


class TestPerItemCheck:
    def test_rejects_quantity_above_segment_maximum(self):
        with pytest.raises(PerItemLimitExceeded) as exc:
            evaluate(_profile(), [("Jersey", 2)], [], now=NOW)

        assert exc.value.item == "Jersey"
        assert exc.value.maximum == 1
        assert exc.value.already_ordered == 0

    def test_counts_quantities_on_open_orders(self):
        placed = [PlacedOrder(status="paid", created_at=NOW - timedelta(days=3), lines=(("Logo Patch", 2),))]

        with pytest.raises(PerItemLimitExceeded) as exc:
            evaluate(_profile(total_item_limit=3), [("Logo Patch", 2)], placed, now=NOW)

        assert exc.value.already_ordered == 2

    def test_claimed_orders_free_the_allowance(self):
        placed = [PlacedOrder(status="claimed", created_at=NOW - timedelta(days=3), lines=(("Logo Patch", 3),))]
        profile = _profile(total_item_limit=3)

        decision = evaluate(profile, [("Logo Patch", 3)], placed, now=NOW)

        assert decision.item_maxima["logo patch"] == 3

    def test_missing_gender_takes_larger_maximum_and_flags_profile(self):
        # Short is a boys-only rule; without a gender the boys' maximum applies
        decision = evaluate(_profile(gender=None), [("Shorts", 1)], [], now=NOW)

        assert decision.profile_incomplete is True
        assert decision.to_dict()["profile_incomplete"] is True


class TestSummarize:
    def test_reports_remaining_allowance(self):
        summary = summarize(_profile(), [_placed("Jersey")], now=NOW)

        assert summary["item_limit"] == 2
        assert summary["slots_used"] == 1
        assert summary["slots_left"] == 1
        assert summary["eligible"] is True
        assert summary["locked_until"] is None
        assert summary["max_quantities"]["jersey"] == 1

    def test_blocked_student_is_not_eligible(self):
        summary = summarize(_profile(total_item_limit=0), [], now=NOW)
        assert summary["eligible"] is False
