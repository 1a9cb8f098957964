"""Request payload assembly for the PayHub v2 API.

Every builder returns a new dict and leaves its input untouched, so an
operation's payload is just a chain of builder calls.
"""

import json
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Any, Optional

from .base import Address, CreditCard, Money, PaymentOptions

RECORD_FORMAT_CREDIT_CARD = "CC"
CVV_PRESENT = "Y"
TEST_MODE = "demo"

_CENTS = Decimal("0.01")

# domain attribute -> PayHub card_data key
ADDRESS_FIELDS = (
    ("address1", "billing_address_1"),
    ("address2", "billing_address_2"),
    ("zip", "billing_zip"),
    ("state", "billing_state"),
    ("city", "billing_city"),
)


@dataclass(frozen=True)
class MerchantContext:
    """Merchant identity sent with every request."""
    organization_id: str
    terminal_id: str


def format_amount(money: Money) -> str:
    """Format an amount in minor units as a dollar string, e.g. 1000 -> "10.00"."""
    if isinstance(money, bool) or not isinstance(money, (int, Decimal)):
        raise TypeError(f"amount must be an int or Decimal in minor units, got {type(money).__name__}")
    cents = Decimal(money)
    if not cents.is_finite():
        raise ValueError("amount must be a finite number")
    if cents < 0:
        raise ValueError("amount must not be negative")
    return str((cents / 100).quantize(_CENTS, rounding=ROUND_HALF_UP))


def build_base(merchant: MerchantContext, test_mode: bool = False) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "merchant": {
            "organization_id": merchant.organization_id,
            "terminal_id": merchant.terminal_id,
        }
    }
    if test_mode:
        payload["mode"] = TEST_MODE
    return payload


def add_address(card_data: Dict[str, Any], address: Optional[Address]) -> Dict[str, Any]:
    if address is None:
        return dict(card_data)
    result = dict(card_data)
    for attr, key in ADDRESS_FIELDS:
        value = getattr(address, attr)
        if value is not None:
            result[key] = value
    return result


def add_card_data(
    payload: Dict[str, Any],
    card: CreditCard,
    address: Optional[Address] = None,
) -> Dict[str, Any]:
    card_data = {
        "card_number": card.number,
        "card_expiry_date": f"{card.year:04d}/{card.month:02d}",
        "cvv_data": card.verification_value,
        "cvv_code": CVV_PRESENT,
    }
    return {
        **payload,
        "card_data": add_address(card_data, address),
        "record_format": RECORD_FORMAT_CREDIT_CARD,
    }


def add_bill(
    payload: Dict[str, Any],
    base_amount: Money,
    tax_amount: Optional[Money] = None,
    shipping_amount: Optional[Money] = None,
    invoice_number: Optional[str] = None,
) -> Dict[str, Any]:
    bill: Dict[str, Any] = {"base_amount": format_amount(base_amount)}
    if tax_amount is not None:
        bill["tax_amount"] = format_amount(tax_amount)
    if shipping_amount is not None:
        bill["shipping_amount"] = format_amount(shipping_amount)
    if invoice_number is not None:
        bill["invoice_number"] = invoice_number
    return {**payload, "bill": bill}


def add_customer_data(payload: Dict[str, Any], options: PaymentOptions) -> Dict[str, Any]:
    return {
        **payload,
        "customer": {
            "first_name": options.first_name,
            "last_name": options.last_name,
            "phone_number": options.phone,
            "email_address": options.email,
        },
    }


def add_reference(payload: Dict[str, Any], transaction_id: str) -> Dict[str, Any]:
    return {**payload, "transaction_id": transaction_id}


def serialize(payload: Dict[str, Any]) -> str:
    return json.dumps(payload)
