"""Built-in booking catalog: class definitions the sample data targets."""

from dataobject_seed.models import FieldSpec, TypeSchema
from dataobject_seed.type_registry import StaticTypeRegistry

BOOKING_TYPES: tuple[TypeSchema, ...] = (
    TypeSchema(
        name="Accommodation",
        class_id="accommodation",
        fields=(FieldSpec("name"),),
        relations=("reservation",),
    ),
    TypeSchema(
        name="Company",
        class_id="company",
        fields=(
            FieldSpec("companyName"),
            FieldSpec("email", "email"),
            FieldSpec("password", "password"),
            FieldSpec("phoneNumber", "integer"),
        ),
    ),
    TypeSchema(
        name="Customer",
        class_id="customer",
        fields=(
            FieldSpec("firstname"),
            FieldSpec("lastname"),
            FieldSpec("gender", "select"),
            FieldSpec("email", "email"),
            FieldSpec("password", "password"),
        ),
    ),
    TypeSchema(
        name="CustomerBookedReservations",
        class_id="customer_booked_reservations",
        fields=(
            FieldSpec("paidPrice", "number"),
            FieldSpec("date", "datetime"),
        ),
        relations=("customer", "reservation"),
    ),
    TypeSchema(
        name="CustomerInstalments",
        class_id="customer_instalments",
        fields=(
            FieldSpec("price", "number"),
            FieldSpec("instalmentDate", "datetime"),
        ),
        relations=("customer",),
    ),
    TypeSchema(
        name="CustomerPayment",
        class_id="customer_payment",
        fields=(
            FieldSpec("totalPrice", "number"),
            FieldSpec("date", "datetime"),
            FieldSpec("isPaid", "boolean"),
            FieldSpec("instalmentsNumber", "integer"),
        ),
        relations=("customer",),
    ),
    TypeSchema(
        name="Reservation",
        class_id="reservation",
        fields=(
            FieldSpec("title"),
            FieldSpec("description"),
            FieldSpec("reservationType", "select"),
            FieldSpec("availabeReservation", "boolean"),
        ),
        relations=("company",),
    ),
    TypeSchema(
        name="ReservationInternalTrip",
        class_id="reservation_internal_trip",
        fields=(
            FieldSpec("name"),
            FieldSpec("price", "number"),
            FieldSpec("description"),
        ),
        relations=("reservation",),
    ),
    TypeSchema(
        name="ReservationReviews",
        class_id="reservation_reviews",
        fields=(
            FieldSpec("rating", "integer"),
            FieldSpec("comment"),
        ),
        relations=("reservation", "customer"),
    ),
    TypeSchema(
        name="Unit",
        class_id="unit",
        fields=(
            FieldSpec("number", "integer"),
            FieldSpec("numberOfRooms", "integer"),
            FieldSpec("numberOfBeds", "integer"),
            FieldSpec("numberOfBathrooms", "integer"),
        ),
        relations=("accommodation",),
    ),
    TypeSchema(
        name="UnitUtilities",
        class_id="unit_utilities",
        fields=(
            FieldSpec("isWifi", "boolean"),
            FieldSpec("isTv", "boolean"),
            FieldSpec("isAirConditioner", "boolean"),
        ),
        relations=("unit",),
    ),
)


def booking_registry() -> StaticTypeRegistry:
    """Fresh type registry holding the booking catalog."""
    return StaticTypeRegistry(BOOKING_TYPES)
