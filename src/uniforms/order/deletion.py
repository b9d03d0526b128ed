"""Soft deletion of orders."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from uniforms.domain import uniforms
from uniforms.order.order import Order


@uniforms.command(part_of="Order")
class DeactivateOrder:
    order_id = Identifier(required=True)


@uniforms.command_handler(part_of=Order)
class DeactivateOrderHandler:
    @handle(DeactivateOrder)
    def deactivate(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.deactivate()
        repo.add(order)
