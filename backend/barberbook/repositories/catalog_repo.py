"""Read repositories for shops, services, staff and customers.

Each maps the SQLAlchemy row to its immutable domain value so the booking
engine never touches ORM objects.
"""

from typing import Optional

from barberbook.db.base import Customer as DbCustomer
from barberbook.db.base import Service as DbService
from barberbook.db.base import Shop as DbShop
from barberbook.db.base import Staff as DbStaff
from barberbook.domain.entities import Customer, Service, Shop, Staff
from barberbook.domain.interfaces import (
    ICustomerLookup,
    IServiceLookup,
    IShopLookup,
    IStaffLookup,
)


class ShopRepository(IShopLookup):
    def __init__(self, db_session) -> None:
        self.db = db_session

    def get(self, shop_id: str) -> Optional[Shop]:
        db_shop = self.db.get(DbShop, shop_id)
        return self._to_domain(db_shop) if db_shop else None

    def _to_domain(self, db_shop: DbShop) -> Shop:
        return Shop(
            id=db_shop.id,
            name=db_shop.name,
            external_location_id=db_shop.square_location_id,
            time_zone=db_shop.time_zone,
        )


class ServiceRepository(IServiceLookup):
    def __init__(self, db_session) -> None:
        self.db = db_session

    def get(self, service_id: str) -> Optional[Service]:
        db_service = self.db.get(DbService, service_id)
        return self._to_domain(db_service) if db_service else None

    def _to_domain(self, db_service: DbService) -> Service:
        return Service(
            id=db_service.id,
            shop_id=db_service.shop_id,
            name=db_service.name,
            duration_minutes=db_service.duration_mins,
            external_catalog_ref=db_service.square_item_id,
        )


class StaffRepository(IStaffLookup):
    def __init__(self, db_session) -> None:
        self.db = db_session

    def get(self, staff_id: str) -> Optional[Staff]:
        db_staff = self.db.get(DbStaff, staff_id)
        return self._to_domain(db_staff) if db_staff else None

    def get_by_external_ref(self, team_member_ref: str) -> Optional[Staff]:
        db_staff = (
            self.db.query(DbStaff)
            .filter_by(square_team_member_id=team_member_ref)
            .first()
        )
        return self._to_domain(db_staff) if db_staff else None

    def _to_domain(self, db_staff: DbStaff) -> Staff:
        return Staff(
            id=db_staff.id,
            shop_id=db_staff.shop_id,
            display_name=db_staff.display_name,
            external_team_member_ref=db_staff.square_team_member_id,
            active=bool(db_staff.active),
        )


class CustomerRepository(ICustomerLookup):
    def __init__(self, db_session) -> None:
        self.db = db_session

    def get(self, customer_id: str) -> Optional[Customer]:
        db_customer = self.db.get(DbCustomer, customer_id)
        return self._to_domain(db_customer) if db_customer else None

    def _to_domain(self, db_customer: DbCustomer) -> Customer:
        return Customer(
            id=db_customer.id,
            shop_id=db_customer.shop_id,
            first_name=db_customer.first_name,
            last_name=db_customer.last_name,
            external_customer_ref=db_customer.square_customer_id,
        )
