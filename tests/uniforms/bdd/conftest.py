"""Shared BDD fixtures and step definitions for the Uniforms domain."""

import json

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from uniforms.item.catalogue import CatalogueItem
from uniforms.item.item import Item
from uniforms.shared.errors import AdmissionRejected

STOCK_PER_SIZE = 20


@pytest.fixture()
def outcome():
    """Container for the last command result or captured rejection."""
    return {"result": None, "exc": None}


@pytest.fixture()
def items():
    """Catalogued item ids by name."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('"{name}" is stocked for "{level}" in sizes "{sizes}"'))
def _(items, name, level, sizes):
    variants = [{"size": size.strip(), "stock": STOCK_PER_SIZE} for size in sizes.split(",")]
    items[name] = current_domain.process(
        CatalogueItem(name=name, education_level=level, variants=json.dumps(variants)),
        asynchronous=False,
    )


@given(parsers.cfparse('"{name}" is stocked for "{level}" without sizes'))
def _(items, name, level):
    items[name] = current_domain.process(
        CatalogueItem(name=name, education_level=level, stock=STOCK_PER_SIZE),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" size "{size}" has {count:d} in stock'))
def _(items, name, size, count):
    item = current_domain.repository_for(Item).get(items[name])
    assert next(v.stock for v in item.variants if v.size == size) == count


@then("the order is accepted")
def _(outcome):
    assert outcome["exc"] is None
    assert outcome["result"]["status"] == "pending"


@then(parsers.cfparse('the order is rejected as "{reason}"'))
def _(outcome, reason):
    assert isinstance(outcome["exc"], AdmissionRejected)
    assert outcome["exc"].reason == reason
