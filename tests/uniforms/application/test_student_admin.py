"""Application tests for student profile administration."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from uniforms.limits.engine import effective_item_limit
from uniforms.shared.policy import LimitPolicy
from uniforms.student.management import SetItemLimit
from uniforms.student.student import StudentProfile


class TestRegisterStudent:
    def test_register(self, register_student):
        register_student()

        profile = current_domain.repository_for(StudentProfile).get("stu-001")
        assert profile.email == "stu-001@school.example"
        assert effective_item_limit(profile, LimitPolicy()) == 8

    def test_duplicate_registration_rejected(self, register_student):
        register_student()

        with pytest.raises(ValidationError):
            register_student()


class TestSetItemLimit:
    def test_limit_is_stamped(self, register_student):
        register_student(total_item_limit=4)

        profile = current_domain.repository_for(StudentProfile).get("stu-001")
        assert profile.total_item_limit == 4
        assert profile.total_item_limit_set_at is not None

    def test_null_restores_cohort_default(self, register_student):
        register_student(total_item_limit=4, student_type="old")

        current_domain.process(SetItemLimit(student_id="stu-001", total_item_limit=None), asynchronous=False)

        profile = current_domain.repository_for(StudentProfile).get("stu-001")
        assert effective_item_limit(profile, LimitPolicy()) == 2
