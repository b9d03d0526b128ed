"""Item aggregate (CQRS) — a uniform item with its size variants and stock.

Every item carries one or more size variants; an unsized item is a single
variant whose size is "N/A". ``stock`` is always the sum of the variant
stocks, and ``status`` is derived from it and the reorder point. Stock only
changes through ``reserve``, ``release`` and ``add_purchase``.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Integer, String

from uniforms.domain import uniforms
from uniforms.item.events import (
    BeginningInventoryReset,
    ItemCatalogued,
    ItemDeactivated,
    PurchaseRecorded,
    ReorderPointChanged,
    StockReleased,
    StockReplenished,
    StockReserved,
)
from uniforms.shared.clock import as_utc
from uniforms.shared.sizes import UNSIZED, is_unsized, match_size

CRITICAL_STOCK_LEVEL = 10
INVENTORY_CYCLE = timedelta(days=365)


class StockStatus(Enum):
    OUT_OF_STOCK = "Out of Stock"
    AT_REORDER_POINT = "At Reorder Point"
    CRITICAL = "Critical"
    ABOVE_THRESHOLD = "Above Threshold"


def stock_status(stock, reorder_point=0) -> str:
    stock = stock or 0
    if stock <= 0:
        return StockStatus.OUT_OF_STOCK.value
    if stock <= (reorder_point or 0):
        return StockStatus.AT_REORDER_POINT.value
    if stock <= CRITICAL_STOCK_LEVEL:
        return StockStatus.CRITICAL.value
    return StockStatus.ABOVE_THRESHOLD.value


@uniforms.entity(part_of="Item")
class SizeVariant:
    size = String(required=True, max_length=50, default=UNSIZED)
    stock = Integer(default=0, min_value=0)
    price = Float()
    purchases = Integer(default=0, min_value=0)


@uniforms.aggregate
class Item:
    name = String(required=True, max_length=255)
    education_level = String(required=True, max_length=100)
    category = String(max_length=100)
    price = Float(default=0.0)
    stock = Integer(default=0, min_value=0)
    reorder_point = Integer(default=0, min_value=0)
    status = String(max_length=50, default=StockStatus.OUT_OF_STOCK.value)
    variants = HasMany(SizeVariant)
    beginning_inventory = Integer(default=0)
    beginning_inventory_date = DateTime()
    purchases = Integer(default=0)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        education_level,
        variants=None,
        price=0.0,
        reorder_point=0,
        category=None,
        size=None,
        stock=0,
    ):
        """Catalogue a new item.

        ``variants`` is a list of ``{"size", "stock", "price"}`` dicts. Without
        it, the flat ``size``/``stock`` pair becomes the single variant.
        """
        if not variants:
            variants = [{"size": size or UNSIZED, "stock": stock, "price": price}]

        sizes = [(v.get("size") or UNSIZED).strip().lower() for v in variants]
        if len(set(sizes)) != len(sizes):
            raise ValidationError({"variants": ["Variant sizes must be unique"]})

        size_variants = [
            SizeVariant(
                size=v.get("size") or UNSIZED,
                stock=v.get("stock") or 0,
                price=v.get("price") if v.get("price") is not None else price,
            )
            for v in variants
        ]
        total = sum(v.stock for v in size_variants)
        now = datetime.now(UTC)

        item = cls(
            name=name.strip(),
            education_level=education_level,
            category=category,
            price=price,
            stock=total,
            reorder_point=reorder_point or 0,
            status=stock_status(total, reorder_point),
            variants=size_variants,
            beginning_inventory=total,
            beginning_inventory_date=now,
            purchases=0,
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            ItemCatalogued(
                item_id=str(item.id),
                name=item.name,
                education_level=education_level,
                stock=total,
                reorder_point=item.reorder_point,
                status=item.status,
                variant_count=len(size_variants),
                created_at=now,
            )
        )
        return item

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def ending_inventory(self) -> int:
        return (self.beginning_inventory or 0) + (self.purchases or 0)

    @property
    def is_sized(self) -> bool:
        return any(not is_unsized(v.size) for v in self.variants)

    def find_variant(self, size=None):
        """Return the variant matching ``size`` (or the only variant for unsized requests)."""
        return match_size(self.variants, size, key=lambda variant: variant.size)

    def available_sizes(self) -> list[str]:
        return [v.size for v in self.variants]

    # -------------------------------------------------------------------
    # Stock movements
    # -------------------------------------------------------------------
    def _require_variant(self, size):
        variant = self.find_variant(size)
        if variant is None:
            raise ValidationError(
                {"size": [f"Size '{size}' not found for {self.name}. Available: {', '.join(self.available_sizes())}"]}
            )
        return variant

    def _refresh_stock(self):
        self.stock = sum(v.stock or 0 for v in self.variants)
        self.status = stock_status(self.stock, self.reorder_point)
        self.updated_at = datetime.now(UTC)

    def _movement(self, variant, quantity, previous):
        return {
            "item_id": str(self.id),
            "item": self.name,
            "size": variant.size,
            "quantity": quantity,
            "previous_stock": previous,
            "new_stock": variant.stock,
            "item_stock": self.stock,
            "status": self.status,
            "success": True,
        }

    def reserve(self, size, quantity):
        """Take ``quantity`` from the matching variant, flooring at zero.

        Insufficient stock never fails: the variant simply empties.
        """
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        variant = self._require_variant(size)
        previous = variant.stock or 0
        variant.stock = max(0, previous - quantity)
        self._refresh_stock()

        self.raise_(
            StockReserved(
                item_id=str(self.id),
                name=self.name,
                size=variant.size,
                quantity=quantity,
                previous_stock=previous,
                new_stock=variant.stock,
                item_stock=self.stock,
                status=self.status,
            )
        )
        return self._movement(variant, quantity, previous)

    def release(self, size, quantity):
        """Return ``quantity`` to the matching variant."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        variant = self._require_variant(size)
        previous = variant.stock or 0
        variant.stock = previous + quantity
        self._refresh_stock()

        self.raise_(
            StockReleased(
                item_id=str(self.id),
                name=self.name,
                size=variant.size,
                quantity=quantity,
                previous_stock=previous,
                new_stock=variant.stock,
                item_stock=self.stock,
                status=self.status,
            )
        )
        return self._movement(variant, quantity, previous)

    def add_purchase(self, quantity, size=None, unit_price=None):
        """Record bought-in stock. Beginning inventory is never touched here."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Purchase quantity must be at least 1"]})
        if is_unsized(size) and len(self.variants) > 1:
            raise ValidationError(
                {"size": [f"{self.name} has several sizes; choose one of: {', '.join(self.available_sizes())}"]}
            )

        variant = self._require_variant(size)
        previous = variant.stock or 0
        variant.stock = previous + quantity
        variant.purchases = (variant.purchases or 0) + quantity
        if unit_price is not None:
            variant.price = unit_price
        self.purchases = (self.purchases or 0) + quantity
        self._refresh_stock()

        self.raise_(
            PurchaseRecorded(
                item_id=str(self.id),
                name=self.name,
                size=variant.size,
                quantity=quantity,
                unit_price=unit_price,
                item_stock=self.stock,
                purchases=self.purchases,
                status=self.status,
            )
        )
        if previous == 0:
            self.raise_(
                StockReplenished(
                    item_id=str(self.id),
                    name=self.name,
                    education_level=self.education_level,
                    size=variant.size,
                    new_stock=variant.stock,
                )
            )
        return self._movement(variant, quantity, previous)

    # -------------------------------------------------------------------
    # Inventory cycle
    # -------------------------------------------------------------------
    def beginning_inventory_expired(self, now=None) -> bool:
        if self.beginning_inventory_date is None:
            return True
        now = as_utc(now) or datetime.now(UTC)
        return now - as_utc(self.beginning_inventory_date) > INVENTORY_CYCLE

    def reset_beginning_inventory_if_expired(self, now=None) -> bool:
        """Start a new inventory cycle once the current one is over a year old."""
        if not self.beginning_inventory_expired(now):
            return False

        now = as_utc(now) or datetime.now(UTC)
        previous_purchases = self.purchases or 0
        self.beginning_inventory = self.ending_inventory
        self.purchases = 0
        for variant in self.variants:
            variant.purchases = 0
        self.beginning_inventory_date = now
        self.updated_at = now

        self.raise_(
            BeginningInventoryReset(
                item_id=str(self.id),
                beginning_inventory=self.beginning_inventory,
                previous_purchases=previous_purchases,
                reset_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def set_reorder_point(self, reorder_point):
        if reorder_point < 0:
            raise ValidationError({"reorder_point": ["Reorder point cannot be negative"]})
        self.reorder_point = reorder_point
        self._refresh_stock()
        self.raise_(
            ReorderPointChanged(
                item_id=str(self.id),
                reorder_point=reorder_point,
                item_stock=self.stock,
                status=self.status,
            )
        )

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"is_active": ["Item is already inactive"]})
        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(ItemDeactivated(item_id=str(self.id), name=self.name))
