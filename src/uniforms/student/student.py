"""StudentProfile aggregate (CQRS) — a student's ordering allowance.

Identity and cohort attributes come from the identity provider; the item
limit, lockout settings and the strike ledger are maintained here.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from uniforms.domain import uniforms
from uniforms.shared.policy import VoidPolicy
from uniforms.student.events import (
    ItemLimitSet,
    OrderLockoutSet,
    StudentBlocked,
    StudentRegistered,
    VoidStrikeRecorded,
    VoidStrikesCleared,
)


class StudentType(Enum):
    NEW = "new"
    OLD = "old"


class Gender(Enum):
    FEMALE = "Female"
    MALE = "Male"


class LockoutUnit(Enum):
    MONTHS = "months"
    ACADEMIC_YEARS = "academic_years"


@uniforms.aggregate
class StudentProfile:
    student_id = Identifier(identifier=True)
    email = String(required=True, max_length=255)
    name = String(max_length=255)
    education_level = String(max_length=100)
    gender = String(choices=Gender)
    student_type = String(choices=StudentType, default=StudentType.NEW.value)
    total_item_limit = Integer()
    total_item_limit_set_at = DateTime()
    order_lockout_period = Integer(min_value=0)
    order_lockout_unit = String(choices=LockoutUnit, default=LockoutUnit.MONTHS.value)
    unclaimed_void_count = Integer(default=0, min_value=0)
    created_at = DateTime()

    @classmethod
    def register(cls, student_id, email, name=None, education_level=None, gender=None, student_type=None):
        profile = cls(
            student_id=student_id,
            email=email.strip().lower(),
            name=name,
            education_level=education_level,
            gender=gender or None,
            student_type=student_type or StudentType.NEW.value,
            unclaimed_void_count=0,
            created_at=datetime.now(UTC),
        )
        profile.raise_(
            StudentRegistered(
                student_id=str(student_id),
                email=profile.email,
                education_level=education_level,
                student_type=profile.student_type,
                gender=profile.gender,
            )
        )
        return profile

    @property
    def is_blocked(self) -> bool:
        return self.total_item_limit is not None and self.total_item_limit <= 0

    def set_item_limit(self, total_item_limit, now=None):
        """Set the slot limit; only orders placed from now on count against it."""
        now = now or datetime.now(UTC)
        self.total_item_limit = total_item_limit
        self.total_item_limit_set_at = now
        self.raise_(
            ItemLimitSet(
                student_id=str(self.student_id),
                total_item_limit=total_item_limit,
                set_at=now,
            )
        )

    def set_order_lockout(self, period, unit=LockoutUnit.MONTHS.value):
        if period is not None and period < 0:
            raise ValidationError({"order_lockout_period": ["Lockout period cannot be negative"]})
        self.order_lockout_period = period
        self.order_lockout_unit = unit or LockoutUnit.MONTHS.value
        self.raise_(
            OrderLockoutSet(
                student_id=str(self.student_id),
                order_lockout_period=period,
                order_lockout_unit=self.order_lockout_unit,
            )
        )

    def record_void_strike(self, order_id=None, policy: VoidPolicy | None = None) -> bool:
        """Add a strike for an unclaimed order. Returns True when this strike blocks the student."""
        policy = policy or VoidPolicy()
        self.unclaimed_void_count = (self.unclaimed_void_count or 0) + 1
        self.raise_(
            VoidStrikeRecorded(
                student_id=str(self.student_id),
                order_id=str(order_id) if order_id else None,
                unclaimed_void_count=self.unclaimed_void_count,
            )
        )

        if self.unclaimed_void_count >= policy.strikes_before_block and not self.is_blocked:
            now = datetime.now(UTC)
            self.total_item_limit = 0
            self.raise_(
                StudentBlocked(
                    student_id=str(self.student_id),
                    unclaimed_void_count=self.unclaimed_void_count,
                    blocked_at=now,
                )
            )
            return True
        return False

    def clear_void_strikes(self):
        previous = self.unclaimed_void_count or 0
        self.unclaimed_void_count = 0
        self.raise_(VoidStrikesCleared(student_id=str(self.student_id), previous_count=previous))
