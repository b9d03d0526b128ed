"""Pydantic request/response schemas for the Uniforms API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------
class VariantSchema(BaseModel):
    size: str = "N/A"
    stock: int = Field(ge=0, default=0)
    price: float | None = Field(ge=0, default=None)


class CatalogueItemRequest(BaseModel):
    name: str = Field(min_length=1)
    education_level: str
    category: str | None = None
    price: float = Field(ge=0, default=0.0)
    reorder_point: int = Field(ge=0, default=0)
    variants: list[VariantSchema] | None = None
    size: str | None = None
    stock: int = Field(ge=0, default=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Jersey",
                    "education_level": "Elementary",
                    "price": 350.0,
                    "reorder_point": 5,
                    "variants": [
                        {"size": "Small (S)", "stock": 20},
                        {"size": "Medium (M)", "stock": 0},
                    ],
                }
            ]
        }
    }


class AddPurchaseRequest(BaseModel):
    quantity: int = Field(ge=1)
    size: str | None = None
    unit_price: float | None = Field(ge=0, default=None)


class SetReorderPointRequest(BaseModel):
    reorder_point: int = Field(ge=0)


class ItemIdResponse(BaseModel):
    item_id: str


class PreOrderCountResponse(BaseModel):
    item_id: str
    name: str
    pre_order_quantity: int


# ---------------------------------------------------------------------------
# Students
# ---------------------------------------------------------------------------
class RegisterStudentRequest(BaseModel):
    student_id: str
    email: str
    name: str | None = None
    education_level: str | None = None
    gender: Literal["Female", "Male"] | None = None
    student_type: Literal["new", "old"] = "new"


class SetItemLimitRequest(BaseModel):
    total_item_limit: int | None = None


class SetOrderLockoutRequest(BaseModel):
    order_lockout_period: int = Field(ge=0)
    order_lockout_unit: Literal["months", "academic_years"] = "months"


class StudentIdResponse(BaseModel):
    student_id: str


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderLineSchema(BaseModel):
    name: str = Field(min_length=1)
    size: str | None = None
    quantity: int = Field(ge=1, default=1)
    unit_price: float = Field(ge=0, default=0.0)
    education_level: str | None = None


class PlaceOrderRequest(BaseModel):
    student_id: str
    student_email: str
    student_name: str
    education_level: str
    items: list[OrderLineSchema] = Field(min_length=1)
    order_type: Literal["regular", "pre-order"] = "regular"
    order_number: str | None = None
    total_amount: float | None = Field(ge=0, default=None)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "student_id": "2024-00123",
                    "student_email": "ana.santos@school.example",
                    "student_name": "Ana Santos",
                    "education_level": "Elementary",
                    "items": [
                        {"name": "Jersey", "size": "Medium", "quantity": 1, "unit_price": 350.0},
                        {"name": "ID Lace", "quantity": 1, "unit_price": 50.0},
                    ],
                }
            ]
        }
    }


class PlaceOrderResponse(BaseModel):
    order_id: str
    order_number: str
    order_type: str
    status: str
    inventory_updates: list[dict] = []
    admission: dict | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: Literal["payment_pending", "processing", "paid", "ready", "claimed", "completed", "cancelled"]
    note: str | None = None


class ConfirmOrderRequest(BaseModel):
    student_id: str | None = None
    student_email: str | None = None


class ConvertPreOrderRequest(BaseModel):
    item_name: str
    size: str | None = None


# ---------------------------------------------------------------------------
# Maintenance
# ---------------------------------------------------------------------------
class VoidUnclaimedRequest(BaseModel):
    window: int = Field(ge=1, default=7)
    window_unit: Literal["seconds", "minutes", "hours", "days"] = "days"
    unconfirmed_only: bool = False


class RestockRequest(BaseModel):
    item_name: str
    education_level: str
    size: str | None = None


class StatusResponse(BaseModel):
    status: str = "ok"
