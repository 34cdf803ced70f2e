# tests/test_billing_validator.py
"""Tests for billing item validation."""

from decimal import Decimal

import pytest

from travelbill.domain.errors import BillingValidationError, EmptyInvoiceError
from travelbill.domain.models.billing import BillingItemInput
from travelbill.domain.money import MAX_AMOUNT
from travelbill.domain.services.billing_validator import validate_item, validate_items


def _item(**overrides):
    item = {"description": "Hiring Charges for Innova", "hsnSac": "996601", "unit": "Km", "quantity": 1, "rate": 100}
    item.update(overrides)
    return item


class TestValidItems:
    def test_line_total_is_quantity_times_rate(self):
        [item] = validate_items([_item(quantity=2, rate="10500")])
        assert item.quantity == Decimal("2")
        assert item.rate == Decimal("10500")
        assert item.line_total == Decimal("21000.00")

    def test_line_total_rounds_half_up(self):
        [item] = validate_items([_item(quantity=3, rate="33.335")])
        assert item.line_total == Decimal("100.01")

    def test_float_amounts_have_no_binary_noise(self):
        [item] = validate_items([_item(quantity=0.1, rate=0.2)])
        assert item.line_total == Decimal("0.02")

    def test_grouped_string_amount(self):
        [item] = validate_items([_item(rate="1,000")])
        assert item.rate == Decimal("1000")

    def test_blank_rows_are_dropped(self):
        items = validate_items([
            {"description": "", "quantity": None, "rate": None},
            _item(description="First"),
            {"description": "  \t ", "quantity": 5},
            _item(description="Second"),
        ])
        assert [i.description for i in items] == ["First", "Second"]

    def test_multiline_description_is_kept(self):
        [item] = validate_items([_item(description="Innova\nMH12AB1234\r\n1-30 Sept")])
        assert item.description == "Innova\nMH12AB1234\r\n1-30 Sept"

    def test_empty_hsn_and_unit_are_allowed(self):
        [item] = validate_items([_item(hsnSac="", unit="")])
        assert item.hsn_sac == ""
        assert item.unit == ""

    def test_accepts_model_instances(self):
        [item] = validate_items([BillingItemInput(description="Tempo", quantity=1, rate=750)])
        assert item.line_total == Decimal("750.00")


class TestRejectedItems:
    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("quantity", 0, "must be greater than 0"),
            ("quantity", -1, "must be greater than 0"),
            ("rate", None, "is required"),
            ("rate", "", "is required"),
            ("rate", "abc", "must be a number"),
            ("rate", "NaN", "must be a finite number"),
            ("quantity", float("inf"), "must be a finite number"),
            ("quantity", True, "must be a number"),
        ],
    )
    def test_bad_amount(self, field, value, message):
        with pytest.raises(BillingValidationError) as exc_info:
            validate_items([_item(**{field: value})])
        err = exc_info.value
        assert err.index == 0
        assert err.field == field
        assert err.errors[0].message == message

    def test_index_counts_dropped_rows(self):
        with pytest.raises(BillingValidationError) as exc_info:
            validate_items([{"description": ""}, _item(), _item(rate=-5)])
        assert exc_info.value.index == 2
        assert exc_info.value.field == "rate"

    def test_all_errors_are_collected(self):
        with pytest.raises(BillingValidationError) as exc_info:
            validate_items([_item(quantity=0), _item(rate="x")])
        assert [(e.index, e.field) for e in exc_info.value.errors] == [(0, "quantity"), (1, "rate")]
        assert "(+1 more)" in str(exc_info.value)

    def test_control_characters_in_description(self):
        with pytest.raises(BillingValidationError) as exc_info:
            validate_items([_item(description="Innova\x07")])
        assert exc_info.value.field == "description"

    def test_control_characters_in_unit(self):
        with pytest.raises(BillingValidationError) as exc_info:
            validate_items([_item(unit="Km\n")])
        assert exc_info.value.field == "unit"

    def test_unsupported_item_type(self):
        with pytest.raises(BillingValidationError) as exc_info:
            validate_items([42])
        assert exc_info.value.field == "item"


class TestEmptyInvoice:
    def test_no_items(self):
        with pytest.raises(EmptyInvoiceError):
            validate_items([])

    def test_only_blank_rows(self):
        with pytest.raises(EmptyInvoiceError) as exc_info:
            validate_items([{"description": " "}, {"description": ""}])
        assert exc_info.value.field == "items"
        assert exc_info.value.index is None

    def test_empty_invoice_is_a_validation_error(self):
        with pytest.raises(BillingValidationError):
            validate_items([])


def test_validate_single_item():
    item = validate_item(_item(quantity="4", rate="250.50"), index=3)
    assert item.line_total == Decimal("1002.00")


def test_validate_single_blank_item_is_rejected():
    with pytest.raises(BillingValidationError) as exc_info:
        validate_item({"description": ""}, index=3)
    assert exc_info.value.index == 3
    assert exc_info.value.field == "description"


class TestAmountBounds:
    def test_largest_storable_amount_is_accepted(self):
        [item] = validate_items([_item(quantity=1, rate="999999999999.99")])
        assert item.line_total == MAX_AMOUNT

    @pytest.mark.parametrize("field", ["quantity", "rate"])
    def test_amount_above_column_limit(self, field):
        with pytest.raises(BillingValidationError) as exc_info:
            validate_items([_item(**{field: "1000000000000"})])
        assert exc_info.value.field == field
        assert exc_info.value.errors[0].message == "is too large"

    def test_huge_exponent_is_a_field_error(self):
        with pytest.raises(BillingValidationError) as exc_info:
            validate_items([_item(quantity="1e30")])
        assert (exc_info.value.index, exc_info.value.field) == (0, "quantity")
        assert exc_info.value.errors[0].message == "is too large"

    def test_line_total_above_column_limit(self):
        with pytest.raises(BillingValidationError) as exc_info:
            validate_items([_item(), _item(quantity="1000000", rate="10000000")])
        assert exc_info.value.index == 1
        assert exc_info.value.field == "rate"
        assert exc_info.value.errors[0].message == "is too large"
