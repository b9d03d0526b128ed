"""Catalogue maintenance — commands and handler for item records."""

import json

import structlog
from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from uniforms.domain import uniforms
from uniforms.item.item import Item

logger = structlog.get_logger(__name__)


@uniforms.command(part_of="Item")
class CatalogueItem:
    name = String(required=True, max_length=255)
    education_level = String(required=True, max_length=100)
    category = String(max_length=100)
    price = Float(default=0.0)
    reorder_point = Integer(default=0, min_value=0)
    variants = Text()  # JSON array of {size, stock, price}
    size = String(max_length=50)
    stock = Integer(default=0, min_value=0)


@uniforms.command(part_of="Item")
class SetReorderPoint:
    item_id = Identifier(required=True)
    reorder_point = Integer(required=True, min_value=0)


@uniforms.command(part_of="Item")
class DeactivateItem:
    item_id = Identifier(required=True)


@uniforms.command_handler(part_of=Item)
class CatalogueHandler:
    @handle(CatalogueItem)
    def catalogue_item(self, command):
        item = Item.create(
            name=command.name,
            education_level=command.education_level,
            variants=json.loads(command.variants) if command.variants else None,
            price=command.price or 0.0,
            reorder_point=command.reorder_point or 0,
            category=command.category,
            size=command.size,
            stock=command.stock or 0,
        )
        current_domain.repository_for(Item).add(item)
        logger.info("Item catalogued", item_id=str(item.id), name=item.name, stock=item.stock)
        return str(item.id)

    @handle(SetReorderPoint)
    def set_reorder_point(self, command):
        repo = current_domain.repository_for(Item)
        item = repo.get(command.item_id)
        item.set_reorder_point(command.reorder_point)
        repo.add(item)

    @handle(DeactivateItem)
    def deactivate_item(self, command):
        repo = current_domain.repository_for(Item)
        item = repo.get(command.item_id)
        item.deactivate()
        repo.add(item)
