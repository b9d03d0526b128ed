"""Uniforms bounded context — ordering and stock control for school uniforms.

Owns the uniform catalogue's stock (items with size variants), student limit
profiles, orders and their lifecycle, restock-driven pre-order conversion and
the auto-void sweep that reclaims stock from unclaimed orders.
"""

from protean.domain import Domain

uniforms = Domain(name="uniforms")
