"""Deterministic Faker fill for declared fields no populator covers."""

import zlib
from datetime import datetime, timedelta
from typing import Any

from faker import Faker

from dataobject_seed.models import TypeSchema


class FakerFiller:
    """
    Fill unmapped scalar fields with realistic data using Faker.

    Each (type, index) pair seeds its own Faker instance, so the same
    instance always receives the same values.
    """

    # Field name → Faker method mapping
    FIELD_MAPPINGS = {
        "email": lambda fake: fake.email(),
        "firstname": lambda fake: fake.first_name(),
        "lastname": lambda fake: fake.last_name(),
        "name": lambda fake: fake.name(),
        "title": lambda fake: fake.sentence(nb_words=4).rstrip("."),
        "companyName": lambda fake: fake.company(),
        "phone": lambda fake: fake.phone_number(),
        "phoneNumber": lambda fake: fake.random_int(min=1000000000, max=1999999999),
        "street": lambda fake: fake.street_address(),
        "city": lambda fake: fake.city(),
        "country": lambda fake: fake.country(),
        "zip": lambda fake: fake.zipcode(),
        "url": lambda fake: fake.url(),
        "description": lambda fake: fake.text(max_nb_chars=200),
        "comment": lambda fake: fake.text(max_nb_chars=200),
    }

    # Kind-based fallbacks
    KIND_FALLBACKS = {
        "text": lambda fake: fake.text(max_nb_chars=50),
        "select": lambda fake: fake.word(),
        "email": lambda fake: fake.email(),
        "password": lambda fake: fake.password(length=12),
        "integer": lambda fake: fake.random_int(min=1, max=1000),
        "number": lambda fake: float(
            fake.pydecimal(left_digits=4, right_digits=2, positive=True)
        ),
        "boolean": lambda fake: fake.boolean(),
    }

    def __init__(self, locale: str | None = None):
        self._fake = Faker(locale)

    @staticmethod
    def seed_for(type_name: str, index: int) -> int:
        """Stable seed for a (type, index) pair."""
        return zlib.crc32(f"{type_name}:{index}".encode())

    def fill(
        self,
        schema: TypeSchema,
        index: int,
        existing: dict[str, Any],
        reference_date: datetime | None = None,
    ) -> dict[str, Any]:
        """
        Generate values for declared fields missing from ``existing``.

        Args:
            schema: Type descriptor
            index: Instance index (1-based)
            existing: Values already assigned by the populator
            reference_date: Upper bound for generated dates

        Returns:
            Mapping of field name to generated value
        """
        self._fake.seed_instance(self.seed_for(schema.name, index))
        anchor = reference_date or datetime.now()

        values = {}
        for spec in schema.fields:
            if spec.name in existing:
                continue
            if spec.name in self.FIELD_MAPPINGS:
                values[spec.name] = self.FIELD_MAPPINGS[spec.name](self._fake)
            elif spec.kind == "date":
                values[spec.name] = self._fake.date_between_dates(
                    (anchor - timedelta(days=365)).date(), anchor.date()
                )
            elif spec.kind == "datetime":
                values[spec.name] = self._fake.date_time_between_dates(
                    anchor - timedelta(days=365), anchor
                )
            else:
                values[spec.name] = self.KIND_FALLBACKS[spec.kind](self._fake)
        return values
