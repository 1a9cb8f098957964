import enum
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional, Dict, Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Amounts are always expressed in minor units (cents)
Money = Union[int, Decimal]


class StandardErrorCode(str, enum.Enum):
    """Processor-independent error taxonomy for failed results."""
    INVALID_NUMBER = "invalid_number"
    INVALID_EXPIRY_DATE = "invalid_expiry_date"
    INVALID_CVC = "invalid_cvc"
    EXPIRED_CARD = "expired_card"
    CARD_DECLINED = "card_declined"
    CALL_ISSUER = "call_issuer"
    PICKUP_CARD = "pickup_card"


# Canonical models
class CreditCard(BaseModel):
    number: str = Field(..., min_length=1, description="Primary account number")
    month: int = Field(..., ge=1, le=12, description="Expiry month")
    year: int = Field(..., ge=1000, le=9999, description="Four digit expiry year")
    verification_value: Optional[str] = Field(None, description="CVV / CVC")

    def __repr__(self) -> str:
        # never leak the PAN or CVV into logs or tracebacks
        return f"CreditCard(number='****{self.number[-4:]}', month={self.month}, year={self.year})"

    __str__ = __repr__


class Address(BaseModel):
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None


class PaymentOptions(BaseModel):
    """Optional per-call data: customer details, billing address and bill extras."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[Address] = None
    billing_address: Optional[Address] = None
    tax_amount: Optional[Money] = None
    shipping_amount: Optional[Money] = None
    invoice_number: Optional[str] = None

    @field_validator("tax_amount", "shipping_amount", mode="before")
    @classmethod
    def _minor_units(cls, v):
        # bool is an int subclass; floats and strings would be coerced silently
        if v is None:
            return v
        if isinstance(v, bool) or not isinstance(v, (int, Decimal)):
            raise ValueError(f"amount must be int or Decimal minor units, got {type(v).__name__}")
        if isinstance(v, Decimal) and not v.is_finite():
            raise ValueError("amount must be finite")
        if v < 0:
            raise ValueError("amount must not be negative")
        return v

    @property
    def resolved_address(self) -> Optional[Address]:
        """The address sent with card data; ``address`` wins over ``billing_address``."""
        return self.address or self.billing_address


class PaymentResult(BaseModel):
    success: bool
    message: Optional[str] = None
    avs_code: Optional[str] = None
    avs_message: Optional[str] = None
    cvv_code: Optional[str] = None
    cvv_message: Optional[str] = None
    error_code: Optional[StandardErrorCode] = None
    transaction_id: Optional[str] = None
    test: bool = False
    raw_response: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _error_code_only_on_failure(self) -> "PaymentResult":
        if self.success and self.error_code is not None:
            raise ValueError("error_code must be empty for a successful result")
        return self


OptionsArg = Union[PaymentOptions, Dict[str, Any], None]


def coerce_options(options: OptionsArg) -> PaymentOptions:
    """Accept either a PaymentOptions instance, a plain dict or None."""
    if options is None:
        return PaymentOptions()
    if isinstance(options, PaymentOptions):
        return options
    return PaymentOptions(**options)


class ConnectorBase(ABC):
    """
    Card connector interface. Implementations should be side-effect free
    until the method makes a network call to the processor.
    """

    @abstractmethod
    def authorize(self, amount: Money, card: CreditCard, options: OptionsArg = None) -> PaymentResult:
        """
        Place a hold on funds without transferring them.
        """
        raise NotImplementedError

    @abstractmethod
    def purchase(self, amount: Money, card: CreditCard, options: OptionsArg = None) -> PaymentResult:
        raise NotImplementedError

    @abstractmethod
    def capture(self, amount: Money, transaction_id: str, options: OptionsArg = None) -> PaymentResult:
        raise NotImplementedError

    @abstractmethod
    def void(self, transaction_id: str, options: OptionsArg = None) -> PaymentResult:
        raise NotImplementedError

    @abstractmethod
    def refund(self, amount: Money, transaction_id: str, options: OptionsArg = None) -> PaymentResult:
        raise NotImplementedError

    @abstractmethod
    def verify(self, card: CreditCard, options: OptionsArg = None) -> PaymentResult:
        """
        Check a card (and optionally its address) without moving funds.
        """
        raise NotImplementedError

    def health_check(self) -> Dict[str, Any]:
        return {"ok": True}
