import re
from decimal import Decimal
from typing import Any, Dict, Optional
from urllib.parse import quote


class FormattingUtils:
    """
    Display formatting for money, addresses and WhatsApp deep links.

    Amounts are always integer minor units (pesewas for GHS).
    """

    CURRENCY_FORMATS = {
        'GHS': {'symbol': 'GH₵', 'decimal_places': 2, 'symbol_position': 'before'},
        'USD': {'symbol': '$', 'decimal_places': 2, 'symbol_position': 'before'},
        'NGN': {'symbol': '₦', 'decimal_places': 2, 'symbol_position': 'before'},
        'EUR': {'symbol': '€', 'decimal_places': 2, 'symbol_position': 'after'},
    }

    WHATSAPP_BASE_URL = "https://wa.me"
    GHANA_COUNTRY_CODE = "233"
    MOBILE_MONEY_NETWORKS = "MTN / Vodafone Cash / AirtelTigo"

    @classmethod
    def format_money(
        cls,
        amount_minor: int,
        currency: str = 'GHS',
        include_symbol: bool = True,
        include_currency_code: bool = False
    ) -> str:
        """
        Format a minor-unit amount for display

        Examples:
            format_money(125050) -> "GH₵1,250.50"
            format_money(1299, 'USD', include_currency_code=True) -> "$12.99 USD"
        """
        currency_config = cls.CURRENCY_FORMATS.get(currency, cls.CURRENCY_FORMATS['GHS'])

        decimal_places = currency_config['decimal_places']
        amount = Decimal(amount_minor) / (10 ** decimal_places)
        formatted_amount = f"{amount:,.{decimal_places}f}"

        result = formatted_amount
        if include_symbol:
            symbol = currency_config['symbol']
            if currency_config['symbol_position'] == 'before':
                result = f"{symbol}{formatted_amount}"
            else:
                result = f"{formatted_amount}{symbol}"

        if include_currency_code:
            result = f"{result} {currency}"

        return result

    @classmethod
    def format_address_short(cls, address: Optional[Dict[str, Any]]) -> str:
        """line1, city, country - what fits in a chat message."""
        if not address:
            return ""
        parts = [address.get('line1'), address.get('city'), address.get('country')]
        return ', '.join(p for p in parts if p)

    @classmethod
    def normalize_whatsapp_number(cls, number: str) -> str:
        """
        Digits only, with a local leading 0 swapped for Ghana's country code.

        Examples:
            normalize_whatsapp_number("055 330 1044") -> "233553301044"
            normalize_whatsapp_number("+233553301044") -> "233553301044"
        """
        digits = re.sub(r'\D', '', number or '')
        if digits.startswith('0'):
            digits = cls.GHANA_COUNTRY_CODE + digits[1:]
        return digits

    @classmethod
    def whatsapp_payment_message(
        cls,
        order_ref: str,
        total_formatted: Optional[str] = None,
        order_type: Optional[str] = None,
        shipping_address: Optional[Dict[str, Any]] = None,
    ) -> str:
        if total_formatted:
            text = (
                f"Order #{order_ref} - I've paid {total_formatted} "
                f"via {cls.MOBILE_MONEY_NETWORKS}."
            )
        else:
            text = f"Order #{order_ref} - I've paid. [Add amount and method when sending]"

        if order_type == 'pickup':
            text += " Pickup."
        elif order_type == 'delivery' and shipping_address:
            text += f" Delivery to: {cls.format_address_short(shipping_address)}"
        return text

    @classmethod
    def whatsapp_link(cls, number: str, text: str) -> str:
        return f"{cls.WHATSAPP_BASE_URL}/{cls.normalize_whatsapp_number(number)}?text={quote(text, safe='')}"
