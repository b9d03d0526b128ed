"""FastAPI routes for the Uniforms domain — items, students, orders, maintenance."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from uniforms.api.schemas import (
    AddPurchaseRequest,
    CatalogueItemRequest,
    ConfirmOrderRequest,
    ConvertPreOrderRequest,
    ItemIdResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    PreOrderCountResponse,
    RegisterStudentRequest,
    RestockRequest,
    SetItemLimitRequest,
    SetOrderLockoutRequest,
    SetReorderPointRequest,
    StatusResponse,
    StudentIdResponse,
    UpdateOrderStatusRequest,
    VoidUnclaimedRequest,
)
from uniforms.item.catalogue import CatalogueItem, DeactivateItem, SetReorderPoint
from uniforms.item.item import Item
from uniforms.item.purchasing import AddPurchase, ResetBeginningInventory
from uniforms.limits.engine import summarize
from uniforms.order.confirmation import ConfirmOrderByStudent
from uniforms.order.conversion import ConvertPreOrder
from uniforms.order.creation import PlaceOrder
from uniforms.order.deletion import DeactivateOrder
from uniforms.order.order import Order
from uniforms.order.queries import placed_orders_for_student, pre_order_count
from uniforms.order.status import UpdateOrderStatus
from uniforms.restock.notifier import process_restock as restock_pre_orders
from uniforms.shared.policy import LimitPolicy
from uniforms.student.management import ClearVoidStrikes, RegisterStudent, SetItemLimit, SetOrderLockout
from uniforms.student.student import StudentProfile
from uniforms.voiding.sweep import void_unclaimed_orders as sweep_unclaimed_orders

# ---------------------------------------------------------------------------
# Item Router
# ---------------------------------------------------------------------------
item_router = APIRouter(prefix="/items", tags=["items"])


def _item_payload(item: Item) -> dict:
    return {
        "item_id": str(item.id),
        "name": item.name,
        "education_level": item.education_level,
        "category": item.category,
        "price": item.price,
        "stock": item.stock,
        "reorder_point": item.reorder_point,
        "status": item.status,
        "beginning_inventory": item.beginning_inventory,
        "purchases": item.purchases,
        "ending_inventory": item.ending_inventory,
        "is_active": item.is_active,
        "variants": [
            {"size": v.size, "stock": v.stock, "price": v.price, "purchases": v.purchases} for v in item.variants
        ],
    }


@item_router.post("", status_code=201, response_model=ItemIdResponse)
async def catalogue_item(body: CatalogueItemRequest) -> ItemIdResponse:
    command = CatalogueItem(
        name=body.name,
        education_level=body.education_level,
        category=body.category,
        price=body.price,
        reorder_point=body.reorder_point,
        variants=json.dumps([v.model_dump() for v in body.variants]) if body.variants else None,
        size=body.size,
        stock=body.stock,
    )
    result = current_domain.process(command, asynchronous=False)
    return ItemIdResponse(item_id=result)


@item_router.get("/{item_id}")
async def get_item(item_id: str) -> dict:
    return _item_payload(current_domain.repository_for(Item).get(item_id))


@item_router.post("/{item_id}/purchases")
async def add_purchase(item_id: str, body: AddPurchaseRequest) -> dict:
    command = AddPurchase(
        item_id=item_id,
        quantity=body.quantity,
        size=body.size,
        unit_price=body.unit_price,
    )
    return current_domain.process(command, asynchronous=False)


@item_router.put("/{item_id}/reorder-point", response_model=StatusResponse)
async def set_reorder_point(item_id: str, body: SetReorderPointRequest) -> StatusResponse:
    current_domain.process(SetReorderPoint(item_id=item_id, reorder_point=body.reorder_point), asynchronous=False)
    return StatusResponse()


@item_router.delete("/{item_id}", response_model=StatusResponse)
async def deactivate_item(item_id: str) -> StatusResponse:
    current_domain.process(DeactivateItem(item_id=item_id), asynchronous=False)
    return StatusResponse()


@item_router.get("/{item_id}/pre-orders", response_model=PreOrderCountResponse)
async def get_pre_order_count(item_id: str) -> PreOrderCountResponse:
    item = current_domain.repository_for(Item).get(item_id)
    return PreOrderCountResponse(
        item_id=str(item.id),
        name=item.name,
        pre_order_quantity=pre_order_count(item.name, item.education_level),
    )


# ---------------------------------------------------------------------------
# Student Router
# ---------------------------------------------------------------------------
student_router = APIRouter(prefix="/students", tags=["students"])


@student_router.post("", status_code=201, response_model=StudentIdResponse)
async def register_student(body: RegisterStudentRequest) -> StudentIdResponse:
    command = RegisterStudent(
        student_id=body.student_id,
        email=body.email,
        name=body.name,
        education_level=body.education_level,
        gender=body.gender,
        student_type=body.student_type,
    )
    result = current_domain.process(command, asynchronous=False)
    return StudentIdResponse(student_id=result)


@student_router.put("/{student_id}/item-limit", response_model=StatusResponse)
async def set_item_limit(student_id: str, body: SetItemLimitRequest) -> StatusResponse:
    current_domain.process(
        SetItemLimit(student_id=student_id, total_item_limit=body.total_item_limit),
        asynchronous=False,
    )
    return StatusResponse()


@student_router.put("/{student_id}/lockout", response_model=StatusResponse)
async def set_order_lockout(student_id: str, body: SetOrderLockoutRequest) -> StatusResponse:
    current_domain.process(
        SetOrderLockout(
            student_id=student_id,
            order_lockout_period=body.order_lockout_period,
            order_lockout_unit=body.order_lockout_unit,
        ),
        asynchronous=False,
    )
    return StatusResponse()


@student_router.delete("/{student_id}/strikes", response_model=StatusResponse)
async def clear_void_strikes(student_id: str) -> StatusResponse:
    current_domain.process(ClearVoidStrikes(student_id=student_id), asynchronous=False)
    return StatusResponse()


@student_router.get("/{student_id}/limits")
async def get_student_limits(student_id: str) -> dict:
    """What the student may still order: slots, lockout and per-item maxima."""
    profile = current_domain.repository_for(StudentProfile).get(student_id)
    summary = summarize(
        profile,
        placed_orders_for_student(profile.student_id, profile.email),
        policy=LimitPolicy.from_env(),
    )
    summary["unclaimed_void_count"] = profile.unclaimed_void_count
    return summary


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=PlaceOrderResponse)
async def place_order(body: PlaceOrderRequest) -> PlaceOrderResponse:
    command = PlaceOrder(
        student_id=body.student_id,
        student_email=body.student_email,
        student_name=body.student_name,
        education_level=body.education_level,
        items=json.dumps([line.model_dump() for line in body.items]),
        order_type=body.order_type,
        order_number=body.order_number,
        total_amount=body.total_amount,
    )
    result = current_domain.process(command, asynchronous=False)
    return PlaceOrderResponse(**result)


@order_router.get("/{order_id}")
async def get_order(order_id: str) -> dict:
    order = current_domain.repository_for(Order).get(order_id)
    return {
        "order_id": str(order.id),
        "order_number": order.order_number,
        "student_id": str(order.student_id),
        "order_type": order.order_type,
        "status": order.status,
        "total_amount": order.total_amount,
        "notes": order.notes,
        "is_active": order.is_active,
        "student_confirmed_at": order.student_confirmed_at.isoformat() if order.student_confirmed_at else None,
        "items": [
            {"name": line.name, "size": line.size, "quantity": line.quantity, "unit_price": line.unit_price}
            for line in order.items
        ],
        "receipt": json.loads(order.receipt_data) if order.receipt_data else None,
    }


@order_router.put("/{order_id}/status")
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> dict:
    command = UpdateOrderStatus(order_id=order_id, status=body.status, note=body.note)
    return current_domain.process(command, asynchronous=False)


@order_router.put("/{order_id}/student-confirmation", response_model=StatusResponse)
async def confirm_order(order_id: str, body: ConfirmOrderRequest) -> StatusResponse:
    command = ConfirmOrderByStudent(
        order_id=order_id,
        student_id=body.student_id,
        student_email=body.student_email,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/conversion")
async def convert_pre_order(order_id: str, body: ConvertPreOrderRequest) -> dict:
    command = ConvertPreOrder(order_id=order_id, item_name=body.item_name, size=body.size)
    return current_domain.process(command, asynchronous=False)


@order_router.delete("/{order_id}", response_model=StatusResponse)
async def deactivate_order(order_id: str) -> StatusResponse:
    current_domain.process(DeactivateOrder(order_id=order_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Maintenance Router
# ---------------------------------------------------------------------------
maintenance_router = APIRouter(prefix="/maintenance", tags=["maintenance"])


@maintenance_router.post("/void-unclaimed")
async def void_unclaimed_orders(body: VoidUnclaimedRequest) -> dict:
    """Auto-void sweep; meant to be triggered by an external scheduler."""
    return sweep_unclaimed_orders(
        window=body.window,
        window_unit=body.window_unit,
        unconfirmed_only=body.unconfirmed_only,
    )


@maintenance_router.post("/restock")
async def process_restock(body: RestockRequest) -> dict:
    return restock_pre_orders(body.item_name, body.education_level, body.size)


@maintenance_router.post("/beginning-inventory")
async def reset_beginning_inventory() -> dict:
    reset_ids = current_domain.process(ResetBeginningInventory(), asynchronous=False)
    return {"reset_count": len(reset_ids), "item_ids": reset_ids}
