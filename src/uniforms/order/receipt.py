"""Receipt payload encoded into an order's QR code."""

import json

from uniforms.shared.clock import as_utc


def build_receipt(order) -> dict:
    items = [{"name": line.name, "quantity": line.quantity, "size": line.size or "N/A"} for line in order.items]
    created_at = as_utc(order.created_at)
    return {
        "type": "order_receipt",
        "orderNumber": order.order_number,
        "studentId": str(order.student_id),
        "studentName": order.student_name,
        "studentEmail": order.student_email,
        "items": items,
        "totalItems": sum(line.quantity for line in order.items),
        "totalAmount": order.total_amount or 0.0,
        "orderDate": created_at.isoformat() if created_at else None,
        "educationLevel": order.education_level,
        "status": order.status,
    }


def encode_receipt(order) -> str:
    return json.dumps(build_receipt(order))
