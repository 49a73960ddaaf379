from decimal import Decimal
from typing import Optional

from app.api.delivery.schemas.schema_resolution import DeliveryQuoteOut, DeliveryResolution
from app.api.delivery.services.service_pincode_resolver import PincodeResolverService
from app.config import settings

CENTS = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS)


def delivery_days_label(days_min: int, days_max: int) -> str:
    if days_min == days_max:
        return f"{days_min} days"
    return f"{days_min}-{days_max} days"


class DeliveryChargeService:
    """Checkout pricing on top of a resolved delivery zone."""

    def __init__(self, resolver: PincodeResolverService, free_shipping_threshold: Optional[Decimal] = None):
        self.resolver = resolver
        self.free_shipping_threshold = _money(
            free_shipping_threshold
            if free_shipping_threshold is not None
            else settings.FREE_SHIPPING_THRESHOLD
        )

    def effective_charge(self, resolution: Optional[DeliveryResolution], cart_total) -> Decimal:
        if resolution is None or _money(cart_total) >= self.free_shipping_threshold:
            return _money(0)
        return _money(resolution.delivery_charge)

    def remaining_for_free_shipping(self, cart_total) -> Decimal:
        remaining = self.free_shipping_threshold - _money(cart_total)
        return remaining if remaining > 0 else _money(0)

    async def quote(self, pincode: str, cart_total) -> DeliveryQuoteOut:
        resolution = await self.resolver.resolve(pincode)
        charge = self.effective_charge(resolution, cart_total)
        return DeliveryQuoteOut(
            pincode=pincode,
            cart_total=_money(cart_total),
            delivery=resolution,
            delivery_charge=charge,
            free_shipping_threshold=self.free_shipping_threshold,
            remaining_for_free_shipping=self.remaining_for_free_shipping(cart_total),
            delivery_days_label=delivery_days_label(
                resolution.delivery_days_min, resolution.delivery_days_max
            ),
            order_total=_money(cart_total) + charge,
        )
