"""
Entity resolution for booking requests.
"""

from typing import Optional

from barberbook.core.exceptions import BadRequestError, NotFoundError
from barberbook.domain.entities import ResolvedBooking
from barberbook.domain.interfaces import (
    ICustomerLookup,
    IServiceLookup,
    IShopLookup,
    IStaffLookup,
)


class EntityResolver:
    """Loads shop/service/customer/staff and checks they share one shop.

    Existence is checked for every entity before any relationship check, so
    a missing customer is reported even when the service belongs elsewhere.
    """

    def __init__(
        self,
        shop_lookup: IShopLookup,
        service_lookup: IServiceLookup,
        customer_lookup: ICustomerLookup,
        staff_lookup: IStaffLookup,
    ):
        self.shop_lookup = shop_lookup
        self.service_lookup = service_lookup
        self.customer_lookup = customer_lookup
        self.staff_lookup = staff_lookup

    def resolve(
        self,
        shop_id: str,
        service_id: str,
        customer_id: str,
        staff_id: Optional[str] = None,
    ) -> ResolvedBooking:
        shop = self.shop_lookup.get(shop_id)
        service = self.service_lookup.get(service_id)
        customer = self.customer_lookup.get(customer_id)
        staff = self.staff_lookup.get(staff_id) if staff_id else None

        if not shop:
            raise NotFoundError("Shop", shop_id)
        if not service:
            raise NotFoundError("Service", service_id)
        if not customer:
            raise NotFoundError("Customer", customer_id)
        if staff_id and not staff:
            raise NotFoundError("Staff", staff_id)

        if service.shop_id != shop_id:
            raise BadRequestError(
                f"Service does not belong to shop {shop_id}. "
                f"Service belongs to shop {service.shop_id}"
            )
        if customer.shop_id != shop_id:
            raise BadRequestError(
                f"Customer does not belong to shop {shop_id}. "
                f"Customer belongs to shop {customer.shop_id}"
            )
        if staff is not None:
            if staff.shop_id != shop_id:
                raise BadRequestError(
                    f"Staff does not belong to shop {shop_id}. "
                    f"Staff belongs to shop {staff.shop_id}"
                )
            if not staff.active:
                raise BadRequestError(f"Staff member {staff.id} is not active")

        return ResolvedBooking(shop=shop, service=service, customer=customer, staff=staff)
