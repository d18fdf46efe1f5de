from datetime import datetime

import pytest
import pytz

from conftest import SUBSCRIPTION_PAYLOAD
from utils.errors import ValidationError
from utils.validators import (
    coerce_amount,
    parse_settings_payload,
    parse_subscription_id,
    parse_subscription_payload,
    validate_email,
    validate_username,
)


def _payload(**changes):
    data = dict(SUBSCRIPTION_PAYLOAD)
    data.update(changes)
    return data


def test_valid_payload_is_typed():
    fields = parse_subscription_payload(_payload(), pytz.utc)
    assert fields["amount"] == pytest.approx(16.99)
    assert fields["next_payment_date"] == datetime(2024, 6, 10, tzinfo=pytz.utc)
    assert fields["status"] == "active"
    assert fields["reminder"] == "3 days before"
    assert fields["notes"] == "shared with family"


def test_plain_date_is_localized_to_operating_timezone():
    denver = pytz.timezone("America/Denver")
    parsed = parse_subscription_payload(_payload(), denver)["next_payment_date"]
    assert parsed.utcoffset().total_seconds() == -6 * 3600
    assert (parsed.year, parsed.month, parsed.day, parsed.hour) == (2024, 6, 10, 0)


def test_iso_timestamp_with_z_suffix():
    parsed = parse_subscription_payload(
        _payload(next_payment_date="2024-06-10T15:30:00.000Z"), pytz.utc
    )["next_payment_date"]
    assert parsed == datetime(2024, 6, 10, 15, 30, tzinfo=pytz.utc)


def test_numeric_string_amount_is_accepted():
    assert parse_subscription_payload(_payload(amount="9.99"), pytz.utc)["amount"] == pytest.approx(9.99)


@pytest.mark.parametrize("amount", [0, -5, "abc", None, True, "nan", "inf"])
def test_bad_amounts_are_rejected(amount):
    with pytest.raises(ValidationError) as exc:
        parse_subscription_payload(_payload(amount=amount), pytz.utc)
    assert exc.value.field == "amount"


@pytest.mark.parametrize(
    "field, value",
    [
        ("billing_cycle", "Weekly"),
        ("category", "Food"),
        ("status", "paused"),
        ("reminder", "2 days before"),
        ("next_payment_date", "not a date"),
        ("next_payment_date", None),
        ("name", "   "),
        ("plan", None),
        ("notes", "x" * 1001),
    ],
)
def test_invalid_fields_name_the_field(field, value):
    with pytest.raises(ValidationError) as exc:
        parse_subscription_payload(_payload(**{field: value}), pytz.utc)
    assert exc.value.field == field


def test_non_object_body_is_rejected():
    with pytest.raises(ValidationError):
        parse_subscription_payload(None, pytz.utc)


@pytest.mark.parametrize("value", [None, "", "none", "None"])
def test_reminder_none_spellings(value):
    assert parse_subscription_payload(_payload(reminder=value), pytz.utc)["reminder"] == "None"


def test_validate_email_normalizes():
    assert validate_email("  Alice@Example.COM ") == "alice@example.com"
    with pytest.raises(ValidationError):
        validate_email("not-an-email")


def test_settings_payload():
    assert parse_settings_payload(
        {"currency": "eur", "email_notifications": False, "reminder_days": 7}
    ) == {"currency": "EUR", "email_notifications": False, "reminder_days": 7}


@pytest.mark.parametrize(
    "data",
    [
        {"currency": "BTC"},
        {"email_notifications": "yes"},
        {"reminder_days": True},
        {"reminder_days": -1},
        {"reminder_days": 400},
        {},
    ],
)
def test_bad_settings_are_rejected(data):
    with pytest.raises(ValidationError):
        parse_settings_payload(data)


def test_subscription_id():
    assert parse_subscription_id("42") == 42
    with pytest.raises(ValidationError):
        parse_subscription_id("abc")


def test_coerce_amount():
    assert coerce_amount("12.5") == 12.5
    assert coerce_amount(None) is None
    assert coerce_amount("x") is None
    assert coerce_amount(float("nan")) is None


def test_amount_is_rounded_to_cents():
    assert parse_subscription_payload(_payload(amount="12.345"), pytz.utc)["amount"] == 12.35
    assert parse_subscription_payload(_payload(amount=0.005), pytz.utc)["amount"] == 0.01


@pytest.mark.parametrize("amount", ["0.001", 0.004, 1e12, "10000000000", "9999999999.999"])
def test_amount_must_fit_stored_precision(amount):
    with pytest.raises(ValidationError) as exc:
        parse_subscription_payload(_payload(amount=amount), pytz.utc)
    assert exc.value.field == "amount"


def test_largest_storable_amount_is_accepted():
    assert parse_subscription_payload(_payload(amount="9999999999.99"), pytz.utc)["amount"] == 9999999999.99


def test_email_length_is_capped():
    local = "a" * 243
    assert validate_email(f"{local}@example.com") == f"{local}@example.com"
    with pytest.raises(ValidationError) as exc:
        validate_email(f"{local}a@example.com")
    assert exc.value.field == "email"


def test_username_is_normalized_and_capped():
    assert validate_username("  Alice ") == "alice"
    assert validate_username("u" * 100) == "u" * 100
    for value in ["u" * 101, "   ", None]:
        with pytest.raises(ValidationError) as exc:
            validate_username(value)
        assert exc.value.field == "username"
