"""Shipping API package."""

from shipping.api.routes import carrier_error_handler, shipping_router, tracking_router

__all__ = ["carrier_error_handler", "shipping_router", "tracking_router"]
