"""Domain events for the StudentProfile aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from uniforms.domain import uniforms


@uniforms.event(part_of="StudentProfile")
class StudentRegistered:
    __version__ = 1

    student_id = Identifier(required=True)
    email = String(required=True)
    education_level = String()
    student_type = String()
    gender = String()


@uniforms.event(part_of="StudentProfile")
class ItemLimitSet:
    """An administrator set (or cleared) the student's item slot limit."""

    __version__ = 1

    student_id = Identifier(required=True)
    total_item_limit = Integer()
    set_at = DateTime(required=True)


@uniforms.event(part_of="StudentProfile")
class OrderLockoutSet:
    __version__ = 1

    student_id = Identifier(required=True)
    order_lockout_period = Integer()
    order_lockout_unit = String()


@uniforms.event(part_of="StudentProfile")
class VoidStrikeRecorded:
    """An order of the student was auto-voided for not being claimed."""

    __version__ = 1

    student_id = Identifier(required=True)
    order_id = Identifier()
    unclaimed_void_count = Integer(required=True)


@uniforms.event(part_of="StudentProfile")
class StudentBlocked:
    """Repeated unclaimed orders removed the student's ordering allowance."""

    __version__ = 1

    student_id = Identifier(required=True)
    unclaimed_void_count = Integer(required=True)
    blocked_at = DateTime(required=True)


@uniforms.event(part_of="StudentProfile")
class VoidStrikesCleared:
    __version__ = 1

    student_id = Identifier(required=True)
    previous_count = Integer(required=True)
