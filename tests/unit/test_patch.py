"""
Unit tests for the PATCH merge rule.

Tests cover:
- Omitted fields are retained
- Present non-blank values overwrite (zero included)
- Blank values are ignored by default
- Clearing optional fields when enabled; required fields never cleared
"""

import pytest
from decimal import Decimal

from brewery_api.src.models.beer import (
    BEER_MUTABLE_FIELDS,
    BEER_REQUIRED_FIELDS,
    BeerEntity,
    BeerPatchDTO,
)
from brewery_api.src.models.customer import (
    CUSTOMER_MUTABLE_FIELDS,
    CUSTOMER_REQUIRED_FIELDS,
    CustomerEntity,
    CustomerPatchDTO,
)
from brewery_api.src.services.patch import apply_patch, patch_updates


@pytest.fixture
def beer() -> BeerEntity:
    return BeerEntity(
        id=1,
        beer_name="Galaxy Cat",
        beer_style="Pale Ale",
        upc="12356",
        quantity_on_hand=122,
        price=Decimal("12.99"),
    )


def patch_beer(beer, body, allow_clear=False):
    return apply_patch(
        beer,
        BeerPatchDTO.model_validate(body),
        BEER_MUTABLE_FIELDS,
        BEER_REQUIRED_FIELDS,
        allow_clear=allow_clear,
    )


class TestPatchPresence:
    """Only fields sent in the body are considered."""

    def test_empty_body_changes_nothing(self, beer):
        assert patch_beer(beer, {}) == beer

    def test_single_field_overwritten(self, beer):
        patched = patch_beer(beer, {"price": "11.49"})

        assert patched.price == Decimal("11.49")
        assert patched.beer_name == "Galaxy Cat"
        assert patched.beer_style == "Pale Ale"
        assert patched.upc == "12356"
        assert patched.quantity_on_hand == 122

    def test_camel_case_keys_are_recognised(self, beer):
        patched = patch_beer(beer, {"beerName": "Mango Bobs", "quantityOnHand": 7})

        assert patched.beer_name == "Mango Bobs"
        assert patched.quantity_on_hand == 7

    def test_zero_is_a_value(self, beer):
        patched = patch_beer(beer, {"quantityOnHand": 0})

        assert patched.quantity_on_hand == 0

    def test_id_and_timestamps_untouched(self, beer):
        patched = patch_beer(beer, {"beerStyle": "IPA"})

        assert patched.id == beer.id
        assert patched.created_date == beer.created_date

    def test_original_entity_not_mutated(self, beer):
        patch_beer(beer, {"beerName": "Other"})

        assert beer.beer_name == "Galaxy Cat"


class TestBlankValues:
    """null and whitespace-only strings."""

    def test_blank_string_ignored_by_default(self, beer):
        patched = patch_beer(beer, {"beerName": "   "})

        assert patched.beer_name == "Galaxy Cat"

    def test_null_ignored_by_default(self, beer):
        patched = patch_beer(beer, {"upc": None, "quantityOnHand": None})

        assert patched.upc == "12356"
        assert patched.quantity_on_hand == 122

    def test_allow_clear_nulls_optional_fields(self, beer):
        patched = patch_beer(beer, {"upc": "", "quantityOnHand": None}, allow_clear=True)

        assert patched.upc is None
        assert patched.quantity_on_hand is None

    def test_allow_clear_never_clears_required_fields(self, beer):
        patched = patch_beer(
            beer,
            {"beerName": "", "beerStyle": None, "price": None},
            allow_clear=True,
        )

        assert patched.beer_name == "Galaxy Cat"
        assert patched.beer_style == "Pale Ale"
        assert patched.price == Decimal("12.99")


class TestPatchUpdates:
    """The computed update mapping."""

    def test_customer_updates_only_sent_fields(self):
        patch = CustomerPatchDTO.model_validate({"email": "new@example.com"})

        updates = patch_updates(patch, CUSTOMER_MUTABLE_FIELDS, CUSTOMER_REQUIRED_FIELDS)

        assert updates == {"email": "new@example.com"}

    def test_customer_email_cleared_when_enabled(self):
        customer = CustomerEntity(id=3, customer_name="Joselito", email="j@example.com")
        patch = CustomerPatchDTO.model_validate({"email": None, "customerName": " "})

        patched = apply_patch(
            customer,
            patch,
            CUSTOMER_MUTABLE_FIELDS,
            CUSTOMER_REQUIRED_FIELDS,
            allow_clear=True,
        )

        assert patched.email is None
        assert patched.customer_name == "Joselito"
