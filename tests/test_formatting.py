from urllib.parse import unquote

import pytest

from storefront.utils.date_utils import DateUtils
from storefront.utils.formatting_utils import FormattingUtils


def test_format_money_ghs():
    assert FormattingUtils.format_money(125050) == "GH₵1,250.50"
    assert FormattingUtils.format_money(0) == "GH₵0.00"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("0553301044", "233553301044"),
        ("+233 55 330 1044", "233553301044"),
        ("233553301044", "233553301044"),
        ("", ""),
    ],
)
def test_normalize_whatsapp_number(raw, expected):
    assert FormattingUtils.normalize_whatsapp_number(raw) == expected


def test_payment_message_for_delivery():
    text = FormattingUtils.whatsapp_payment_message(
        "12345678",
        "GH₵20.00",
        "delivery",
        {"line1": "12 Oxford St", "city": "Accra", "country": "Ghana", "postal_code": "GA-1"},
    )
    assert text == (
        "Order #12345678 - I've paid GH₵20.00 via MTN / Vodafone Cash / AirtelTigo. "
        "Delivery to: 12 Oxford St, Accra, Ghana"
    )


def test_payment_message_for_pickup():
    text = FormattingUtils.whatsapp_payment_message("87654321", "GH₵5.00", "pickup")
    assert text.endswith(" Pickup.")


def test_whatsapp_link_encodes_text():
    link = FormattingUtils.whatsapp_link("0553301044", "Order #1 - paid & done")
    assert link.startswith("https://wa.me/233553301044?text=")
    encoded = link.split("?text=", 1)[1]
    assert " " not in encoded and "&" not in encoded
    assert unquote(encoded) == "Order #1 - paid & done"


def test_last_n_local_days_ends_today():
    days = DateUtils.last_n_local_days(30, "Africa/Accra")
    assert len(days) == 30
    assert days == sorted(days)
    assert days[-1] == DateUtils.local_date(DateUtils.now_utc(), "Africa/Accra")
