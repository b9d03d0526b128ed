from uniforms.api.errors import register_exception_handlers
from uniforms.api.routes import item_router, maintenance_router, order_router, student_router

__all__ = ["item_router", "maintenance_router", "order_router", "student_router", "register_exception_handlers"]
