"""Tunable business policy for admission control and the auto-void sweep.

Policies are immutable and passed explicitly into the code that needs them.
``from_env`` reads overrides from the process environment so deployments can
change defaults without code changes.
"""

import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


@dataclass(frozen=True)
class LimitPolicy:
    new_student_item_limit: int = 8
    old_student_item_limit: int = 2
    months_per_academic_year: int = 10
    default_item_max: int = 1

    @classmethod
    def from_env(cls) -> "LimitPolicy":
        return cls(
            new_student_item_limit=_env_int("UNIFORMS_NEW_STUDENT_ITEM_LIMIT", cls.new_student_item_limit),
            old_student_item_limit=_env_int("UNIFORMS_OLD_STUDENT_ITEM_LIMIT", cls.old_student_item_limit),
            months_per_academic_year=_env_int("UNIFORMS_MONTHS_PER_ACADEMIC_YEAR", cls.months_per_academic_year),
            default_item_max=_env_int("UNIFORMS_DEFAULT_ITEM_MAX", cls.default_item_max),
        )

    def cohort_default(self, student_type: str | None) -> int | None:
        if student_type == "new":
            return self.new_student_item_limit
        if student_type == "old":
            return self.old_student_item_limit
        return None


@dataclass(frozen=True)
class VoidPolicy:
    strikes_before_block: int = 3

    @classmethod
    def from_env(cls) -> "VoidPolicy":
        return cls(strikes_before_block=_env_int("UNIFORMS_STRIKES_BEFORE_BLOCK", cls.strikes_before_block))
