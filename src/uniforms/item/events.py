"""Domain events for the Item aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from uniforms.domain import uniforms


@uniforms.event(part_of="Item")
class ItemCatalogued:
    """A uniform item was added to the catalogue with its size variants."""

    __version__ = 1

    item_id = Identifier(required=True)
    name = String(required=True)
    education_level = String(required=True)
    stock = Integer(required=True)
    reorder_point = Integer()
    status = String(required=True)
    variant_count = Integer()
    created_at = DateTime()


@uniforms.event(part_of="Item")
class StockReserved:
    """Stock was taken from a variant for an order."""

    __version__ = 1

    item_id = Identifier(required=True)
    name = String(required=True)
    size = String()
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    item_stock = Integer(required=True)
    status = String(required=True)


@uniforms.event(part_of="Item")
class StockReleased:
    """Stock was returned to a variant after a cancellation."""

    __version__ = 1

    item_id = Identifier(required=True)
    name = String(required=True)
    size = String()
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    item_stock = Integer(required=True)
    status = String(required=True)


@uniforms.event(part_of="Item")
class PurchaseRecorded:
    """New stock was bought in for a variant."""

    __version__ = 1

    item_id = Identifier(required=True)
    name = String(required=True)
    size = String()
    quantity = Integer(required=True)
    unit_price = Float()
    item_stock = Integer(required=True)
    purchases = Integer(required=True)
    status = String(required=True)


@uniforms.event(part_of="Item")
class StockReplenished:
    """A variant that was out of stock has stock again."""

    __version__ = 1

    item_id = Identifier(required=True)
    name = String(required=True)
    education_level = String(required=True)
    size = String()
    new_stock = Integer(required=True)


@uniforms.event(part_of="Item")
class BeginningInventoryReset:
    """A new inventory cycle started: ending inventory became the beginning inventory."""

    __version__ = 1

    item_id = Identifier(required=True)
    beginning_inventory = Integer(required=True)
    previous_purchases = Integer(required=True)
    reset_at = DateTime(required=True)


@uniforms.event(part_of="Item")
class ReorderPointChanged:
    __version__ = 1

    item_id = Identifier(required=True)
    reorder_point = Integer(required=True)
    item_stock = Integer(required=True)
    status = String(required=True)


@uniforms.event(part_of="Item")
class ItemDeactivated:
    __version__ = 1

    item_id = Identifier(required=True)
    name = String(required=True)
