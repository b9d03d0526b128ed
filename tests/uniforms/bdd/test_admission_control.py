"""BDD tests for order admission control."""

import json

from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when
from uniforms.limits.engine import summarize
from uniforms.order.creation import PlaceOrder
from uniforms.order.queries import placed_orders_for_student
from uniforms.shared.errors import AdmissionRejected
from uniforms.student.management import RegisterStudent, SetItemLimit, SetOrderLockout
from uniforms.student.student import StudentProfile

scenarios("features/admission_control.feature")

STUDENT_ID = "stu-bdd-001"


def _place(name, quantity, size=None):
    return current_domain.process(
        PlaceOrder(
            student_id=STUDENT_ID,
            student_email=f"{STUDENT_ID}@school.example",
            student_name="Ana Santos",
            education_level="Elementary",
            items=json.dumps([{"name": name, "size": size, "quantity": quantity}]),
        ),
        asynchronous=False,
    )


def _register(student_type, gender, level, limit=None):
    current_domain.process(
        RegisterStudent(
            student_id=STUDENT_ID,
            email=f"{STUDENT_ID}@school.example",
            education_level=level,
            gender=gender,
            student_type=student_type,
        ),
        asynchronous=False,
    )
    if limit is not None:
        current_domain.process(SetItemLimit(student_id=STUDENT_ID, total_item_limit=limit), asynchronous=False)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a new "{gender}" student in "{level}" with an item limit of {limit:d}'))
def _(gender, level, limit):
    _register("new", gender, level, limit)


@given(parsers.cfparse('an old "{gender}" student in "{level}" without an item limit'))
def _(gender, level):
    _register("old", gender, level)


@given(parsers.cfparse('the student is locked out for {period:d} "{unit}" after a full order'))
def _(period, unit):
    current_domain.process(
        SetOrderLockout(student_id=STUDENT_ID, order_lockout_period=period, order_lockout_unit=unit),
        asynchronous=False,
    )


@given(
    parsers.re(r'the student has ordered (?P<quantity>\d+) "(?P<name>[^"]+)"(?: in size "(?P<size>[^"]+)")?'),
    converters={"quantity": int},
)
def _(quantity, name, size):
    _place(name, quantity, size)


@given(parsers.cfparse("the student's item limit is reset to {limit:d}"))
def _(limit):
    current_domain.process(SetItemLimit(student_id=STUDENT_ID, total_item_limit=limit), asynchronous=False)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(
    parsers.re(r'the student orders (?P<quantity>\d+) "(?P<name>[^"]+)"(?: in size "(?P<size>[^"]+)")?'),
    converters={"quantity": int},
)
def _(outcome, quantity, name, size):
    try:
        outcome["result"] = _place(name, quantity, size)
    except AdmissionRejected as exc:
        outcome["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("{used:d} of {limit:d} item slots are used"))
def _(used, limit):
    profile = current_domain.repository_for(StudentProfile).get(STUDENT_ID)
    summary = summarize(profile, placed_orders_for_student(STUDENT_ID))

    assert summary["slots_used"] == used
    assert summary["item_limit"] == limit
