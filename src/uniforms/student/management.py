"""Student profile administration — commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from uniforms.domain import uniforms
from uniforms.student.student import StudentProfile

logger = structlog.get_logger(__name__)


@uniforms.command(part_of="StudentProfile")
class RegisterStudent:
    student_id = Identifier(required=True)
    email = String(required=True, max_length=255)
    name = String(max_length=255)
    education_level = String(max_length=100)
    gender = String(max_length=10)
    student_type = String(max_length=10)


@uniforms.command(part_of="StudentProfile")
class SetItemLimit:
    student_id = Identifier(required=True)
    total_item_limit = Integer()  # None restores the cohort default


@uniforms.command(part_of="StudentProfile")
class SetOrderLockout:
    student_id = Identifier(required=True)
    order_lockout_period = Integer(min_value=0)
    order_lockout_unit = String(max_length=20)


@uniforms.command(part_of="StudentProfile")
class ClearVoidStrikes:
    student_id = Identifier(required=True)


@uniforms.command_handler(part_of=StudentProfile)
class StudentProfileHandler:
    @handle(RegisterStudent)
    def register_student(self, command):
        repo = current_domain.repository_for(StudentProfile)
        existing = repo._dao.query.filter(student_id=command.student_id).all()
        if existing.items:
            raise ValidationError({"student_id": ["Student is already registered"]})

        profile = StudentProfile.register(
            student_id=command.student_id,
            email=command.email,
            name=command.name,
            education_level=command.education_level,
            gender=command.gender,
            student_type=command.student_type,
        )
        repo.add(profile)
        logger.info("Student registered", student_id=str(profile.student_id))
        return str(profile.student_id)

    @handle(SetItemLimit)
    def set_item_limit(self, command):
        repo = current_domain.repository_for(StudentProfile)
        profile = repo.get(command.student_id)
        profile.set_item_limit(command.total_item_limit)
        repo.add(profile)

    @handle(SetOrderLockout)
    def set_order_lockout(self, command):
        repo = current_domain.repository_for(StudentProfile)
        profile = repo.get(command.student_id)
        profile.set_order_lockout(command.order_lockout_period, command.order_lockout_unit)
        repo.add(profile)

    @handle(ClearVoidStrikes)
    def clear_void_strikes(self, command):
        repo = current_domain.repository_for(StudentProfile)
        profile = repo.get(command.student_id)
        profile.clear_void_strikes()
        repo.add(profile)
