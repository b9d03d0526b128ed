import json

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def uniforms_bed():
    from uniforms.domain import uniforms

    bed = DomainFixture(uniforms)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(uniforms_bed):
    with uniforms_bed.domain_context():
        yield


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def catalogue():
    """Catalogue an item through the command pipeline and return its id."""
    from protean import current_domain
    from uniforms.item.catalogue import CatalogueItem

    def _catalogue(name="Jersey", education_level="Elementary", variants=None, **kwargs):
        if variants is None:
            variants = [{"size": "Small", "stock": 20}, {"size": "Medium", "stock": 20}]
        return current_domain.process(
            CatalogueItem(
                name=name,
                education_level=education_level,
                variants=json.dumps(variants),
                **kwargs,
            ),
            asynchronous=False,
        )

    return _catalogue


@pytest.fixture()
def register_student():
    from protean import current_domain
    from uniforms.student.management import RegisterStudent, SetItemLimit

    def _register(student_id="stu-001", total_item_limit=None, **kwargs):
        defaults = {
            "email": f"{student_id}@school.example",
            "name": "Ana Santos",
            "education_level": "Elementary",
            "gender": "Female",
            "student_type": "new",
        }
        defaults.update(kwargs)
        current_domain.process(RegisterStudent(student_id=student_id, **defaults), asynchronous=False)
        if total_item_limit is not None:
            current_domain.process(
                SetItemLimit(student_id=student_id, total_item_limit=total_item_limit),
                asynchronous=False,
            )
        return student_id

    return _register


@pytest.fixture()
def place_order():
    from protean import current_domain
    from uniforms.order.creation import PlaceOrder

    def _place(student_id="stu-001", items=None, order_type="regular", education_level="Elementary", **kwargs):
        if items is None:
            items = [{"name": "Jersey", "size": "Medium", "quantity": 1, "unit_price": 350.0}]
        return current_domain.process(
            PlaceOrder(
                student_id=student_id,
                student_email=f"{student_id}@school.example",
                student_name="Ana Santos",
                education_level=education_level,
                items=json.dumps(items),
                order_type=order_type,
                **kwargs,
            ),
            asynchronous=False,
        )

    return _place
