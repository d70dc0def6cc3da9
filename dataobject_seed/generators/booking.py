"""Populators and relation tables for the booking catalog."""

from datetime import datetime, timedelta
from typing import Any

from dataobject_seed.generators.base import BasePopulator
from dataobject_seed.models import CARDINALITY_MANY, RelationSpec

DEFAULT_PASSWORD = "password123"
RESERVATION_TYPES = ("Hotel", "Appartement")


def _reference_date(context: dict[str, Any]) -> datetime:
    return context.get("reference_date") or datetime.now()


class CustomerPopulator(BasePopulator):
    def populate(self, index: int, **context: Any) -> dict[str, Any]:
        return {
            "firstname": f"Customer{index}",
            "lastname": f"User{index}",
            "gender": "male" if index % 2 == 0 else "female",
            "email": f"customer{index}@example.com",
            "password": DEFAULT_PASSWORD,
        }


class CompanyPopulator(BasePopulator):
    def populate(self, index: int, **context: Any) -> dict[str, Any]:
        return {
            "companyName": f"Company {index}",
            "email": f"company{index}@example.com",
            "password": DEFAULT_PASSWORD,
            "phoneNumber": 1000000000 + index,
        }


class AccommodationPopulator(BasePopulator):
    def populate(self, index: int, **context: Any) -> dict[str, Any]:
        return {"name": f"Accommodation {index}"}


class UnitPopulator(BasePopulator):
    def populate(self, index: int, **context: Any) -> dict[str, Any]:
        return {
            "number": index,
            "numberOfRooms": (index % 5) + 1,
            "numberOfBeds": (index % 4) + 1,
            "numberOfBathrooms": (index % 3) + 1,
        }


class ReservationPopulator(BasePopulator):
    def populate(self, index: int, **context: Any) -> dict[str, Any]:
        return {
            "title": f"Reservation {index}",
            "description": f"Description for reservation {index}",
            # Rotates by index so reruns produce the same graph
            "reservationType": RESERVATION_TYPES[index % len(RESERVATION_TYPES)],
            "availabeReservation": True,
        }


class CustomerBookedReservationsPopulator(BasePopulator):
    def populate(self, index: int, **context: Any) -> dict[str, Any]:
        return {
            "paidPrice": 500 + index * 50,
            "date": _reference_date(context),
        }


class CustomerPaymentPopulator(BasePopulator):
    def populate(self, index: int, **context: Any) -> dict[str, Any]:
        return {
            "totalPrice": 500 + index * 50,
            "date": _reference_date(context) + timedelta(days=index),
            "isPaid": index % 2 == 0,
            "instalmentsNumber": (index % 12) + 1,
        }


class CustomerInstalmentsPopulator(BasePopulator):
    def populate(self, index: int, **context: Any) -> dict[str, Any]:
        return {
            "price": 100 + index * 10,
            "instalmentDate": _reference_date(context),
        }


class ReservationInternalTripPopulator(BasePopulator):
    def populate(self, index: int, **context: Any) -> dict[str, Any]:
        return {
            "name": f"Trip {index}",
            "price": 100 + index * 10,
            "description": f"Trip description {index}",
        }


class ReservationReviewsPopulator(BasePopulator):
    def populate(self, index: int, **context: Any) -> dict[str, Any]:
        return {
            "rating": (index % 5) + 1,
            "comment": f"Sample review comment {index}",
        }


class UnitUtilitiesPopulator(BasePopulator):
    def populate(self, index: int, **context: Any) -> dict[str, Any]:
        return {
            "isWifi": index % 2 == 0,
            "isTv": index % 3 == 0,
            "isAirConditioner": index % 2 == 1,
        }


BOOKING_POPULATORS: dict[str, type[BasePopulator]] = {
    "Accommodation": AccommodationPopulator,
    "Company": CompanyPopulator,
    "Customer": CustomerPopulator,
    "CustomerBookedReservations": CustomerBookedReservationsPopulator,
    "CustomerInstalments": CustomerInstalmentsPopulator,
    "CustomerPayment": CustomerPaymentPopulator,
    "Reservation": ReservationPopulator,
    "ReservationInternalTrip": ReservationInternalTripPopulator,
    "ReservationReviews": ReservationReviewsPopulator,
    "Unit": UnitPopulator,
    "UnitUtilities": UnitUtilitiesPopulator,
}

BOOKING_RELATIONS: dict[str, tuple[RelationSpec, ...]] = {
    "Accommodation": (RelationSpec("reservation", "Reservation"),),
    "CustomerBookedReservations": (
        RelationSpec("customer", "Customer"),
        RelationSpec("reservation", "Reservation"),
    ),
    "CustomerInstalments": (RelationSpec("customer", "Customer"),),
    # The class definition only allows CustomerPayment objects in this field
    "CustomerPayment": (RelationSpec("customer", "CustomerPayment"),),
    "Reservation": (RelationSpec("company", "Company"),),
    "ReservationInternalTrip": (RelationSpec("reservation", "Reservation"),),
    "ReservationReviews": (
        RelationSpec("reservation", "Reservation"),
        RelationSpec("customer", "Customer"),
    ),
    "Unit": (RelationSpec("accommodation", "Accommodation"),),
    "UnitUtilities": (
        RelationSpec("unit", "Unit", cardinality=CARDINALITY_MANY, max_targets=3),
    ),
}
