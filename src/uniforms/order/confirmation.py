"""Student confirmation of a pending order."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from uniforms.domain import uniforms
from uniforms.order.order import Order


@uniforms.command(part_of="Order")
class ConfirmOrderByStudent:
    order_id = Identifier(required=True)
    student_id = Identifier()
    student_email = String(max_length=255)


@uniforms.command_handler(part_of=Order)
class ConfirmOrderByStudentHandler:
    @handle(ConfirmOrderByStudent)
    def confirm(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.confirm_by_student(student_id=command.student_id, email=command.student_email)
        repo.add(order)
        return order.student_confirmed_at.isoformat()
