from .router_delivery_public import router as router_delivery_public

__all__ = ["router_delivery_public"]
