"""Variant Store — locate size rows and move stock on behalf of orders.

A ``VariantStore`` is created per command. It loads each item aggregate at
most once, applies every stock movement of the command to that copy and
persists each touched item once in ``save``, so one command never writes the
same item twice.
"""

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from uniforms.item.item import Item
from uniforms.limits.segments import ALL_EDUCATION_LEVELS, normalize_item_name, resolve_item_key

logger = structlog.get_logger(__name__)


def cohort_matches(item_level, requested_level) -> bool:
    if not requested_level or item_level == ALL_EDUCATION_LEVELS:
        return True
    return (item_level or "").strip().lower() == requested_level.strip().lower()


class VariantStore:
    def __init__(self):
        self._repo = current_domain.repository_for(Item)
        self._loaded: dict[str, Item] = {}
        self._touched: dict[str, Item] = {}

    def _load(self, item_id) -> Item:
        item_id = str(item_id)
        if item_id not in self._loaded:
            self._loaded[item_id] = self._repo.get(item_id)
        return self._loaded[item_id]

    def candidates(self, item_name, education_level) -> list[Item]:
        """Active items with this name in the cohort, cohort-specific rows first."""
        active = self._repo._dao.query.filter(is_active=True).all().items
        wanted = normalize_item_name(item_name)
        named = [item for item in active if normalize_item_name(item.name) == wanted]
        if not named:
            key = resolve_item_key(item_name)
            named = [item for item in active if resolve_item_key(item.name) == key]

        in_cohort = [item for item in named if cohort_matches(item.education_level, education_level)]
        in_cohort.sort(key=lambda item: item.education_level == ALL_EDUCATION_LEVELS)
        return [self._load(item.id) for item in in_cohort]

    def find_size_row(self, item_name, education_level, size=None):
        """Return ``(item, variant)`` for the request, or raise ``ObjectNotFoundError``."""
        for item in self.candidates(item_name, education_level):
            variant = item.find_variant(size)
            if variant is not None:
                return item, variant

        raise ObjectNotFoundError(
            f"No stock row for '{item_name}' size '{size or 'N/A'}' in {education_level or 'any level'}"
        )

    def reserve(self, item_name, education_level, size, quantity) -> dict:
        item, variant = self.find_size_row(item_name, education_level, size)
        movement = item.reserve(variant.size, quantity)
        self._touched[str(item.id)] = item
        logger.info(
            "Stock reserved",
            item=item.name,
            size=variant.size,
            quantity=quantity,
            new_stock=movement["new_stock"],
        )
        return movement

    def release(self, item_name, education_level, size, quantity) -> dict:
        item, variant = self.find_size_row(item_name, education_level, size)
        movement = item.release(variant.size, quantity)
        self._touched[str(item.id)] = item
        logger.info(
            "Stock released",
            item=item.name,
            size=variant.size,
            quantity=quantity,
            new_stock=movement["new_stock"],
        )
        return movement

    def _apply_lines(self, operation, lines, education_level) -> list[dict]:
        updates = []
        for line in lines:
            level = line.education_level or education_level
            try:
                updates.append(operation(line.name, level, line.size, line.quantity))
            except (ObjectNotFoundError, ValidationError) as exc:
                logger.warning(
                    "Stock movement failed",
                    item=line.name,
                    size=line.size,
                    quantity=line.quantity,
                    error=str(exc),
                )
                updates.append(
                    {
                        "item": line.name,
                        "size": line.size,
                        "quantity": line.quantity,
                        "success": False,
                        "error": str(exc),
                    }
                )
        return updates

    def reserve_lines(self, lines, education_level) -> list[dict]:
        """Reserve every order line; failures are reported per line, never raised."""
        return self._apply_lines(self.reserve, lines, education_level)

    def release_lines(self, lines, education_level) -> list[dict]:
        return self._apply_lines(self.release, lines, education_level)

    def save(self):
        for item in self._touched.values():
            self._repo.add(item)
        self._touched.clear()
