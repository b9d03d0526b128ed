"""Strike ledger — look up a student's profile and record unclaimed-order strikes."""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from uniforms.shared.policy import VoidPolicy
from uniforms.student.student import StudentProfile

logger = structlog.get_logger(__name__)


def find_profile(student_id=None, email=None) -> StudentProfile:
    """Load a profile by student id, falling back to email."""
    repo = current_domain.repository_for(StudentProfile)
    if student_id:
        try:
            return repo.get(student_id)
        except ObjectNotFoundError:
            if not email:
                raise

    if email:
        matches = repo._dao.query.filter(email=email.strip().lower()).all().items
        if matches:
            return repo.get(matches[0].student_id)

    raise ObjectNotFoundError(f"No student profile for id={student_id} email={email}")


def record_strike(student_id, email=None, order_id=None, policy: VoidPolicy | None = None) -> StudentProfile | None:
    """Add a strike to the student's ledger, blocking them at the policy threshold.

    Students without a profile (pre-orders need none) have no ledger; the
    strike is skipped and ``None`` returned.
    """
    policy = policy or VoidPolicy.from_env()
    try:
        profile = find_profile(student_id, email)
    except ObjectNotFoundError:
        logger.warning(
            "No student profile; strike skipped",
            student_id=str(student_id),
            order_id=str(order_id) if order_id else None,
        )
        return None

    blocked = profile.record_void_strike(order_id=order_id, policy=policy)
    current_domain.repository_for(StudentProfile).add(profile)

    logger.info(
        "Void strike recorded",
        student_id=str(profile.student_id),
        order_id=str(order_id) if order_id else None,
        unclaimed_void_count=profile.unclaimed_void_count,
    )
    if blocked:
        logger.warning(
            "Student blocked after repeated unclaimed orders",
            student_id=str(profile.student_id),
            unclaimed_void_count=profile.unclaimed_void_count,
        )
    return profile
