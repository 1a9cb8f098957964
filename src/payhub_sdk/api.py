import re
import logging
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel, Field
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .auth import PAYMENT_RATE_LIMIT, limiter, verify_api_key
from .connectors.base import ConnectorBase, CreditCard, PaymentOptions, PaymentResult
from .connectors.payhub_connector import PayHubConnector
from .exceptions import ConfigurationError, TransportError

logger = logging.getLogger(__name__)

app = FastAPI(title="PayHub Connector - Reference API")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

TRANSACTION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

_connector: Optional[ConnectorBase] = None


def get_connector() -> ConnectorBase:
    """Lazily build the shared PayHubConnector from PAYHUB_* environment variables."""
    global _connector
    if _connector is None:
        try:
            _connector = PayHubConnector()
        except ConfigurationError as e:
            logger.error(f"PayHub connector is not configured: {e}")
            raise HTTPException(status_code=500, detail="Payment connector is not configured")
    return _connector


def validate_transaction_id(transaction_id: str) -> str:
    if not TRANSACTION_ID_PATTERN.match(transaction_id):
        raise HTTPException(status_code=400, detail="Invalid transaction id")
    return transaction_id


class CardPaymentBody(BaseModel):
    amount: int = Field(..., ge=0, description="Amount in minor units")
    card: CreditCard
    options: PaymentOptions = Field(default_factory=PaymentOptions)


class VerifyBody(BaseModel):
    card: CreditCard
    options: PaymentOptions = Field(default_factory=PaymentOptions)


class AmountBody(BaseModel):
    amount: int = Field(0, ge=0, description="Amount in minor units")


def _execute(operation: Callable[..., PaymentResult], *args: Any) -> Dict[str, Any]:
    try:
        result = operation(*args)
    except TransportError as e:
        logger.error(f"PayHub unreachable during {getattr(operation, '__name__', 'request')}: {e}")
        raise HTTPException(status_code=502, detail="Payment processor unavailable")
    return result.model_dump(mode="json")


@app.post("/payments/authorize")
@limiter.limit(PAYMENT_RATE_LIMIT)
def authorize_payment(
    request: Request,
    body: CardPaymentBody,
    api_key: str = Depends(verify_api_key),
    connector: ConnectorBase = Depends(get_connector),
):
    return _execute(connector.authorize, body.amount, body.card, body.options)


@app.post("/payments/purchase")
@limiter.limit(PAYMENT_RATE_LIMIT)
def purchase_payment(
    request: Request,
    body: CardPaymentBody,
    api_key: str = Depends(verify_api_key),
    connector: ConnectorBase = Depends(get_connector),
):
    return _execute(connector.purchase, body.amount, body.card, body.options)


@app.post("/payments/verify")
@limiter.limit(PAYMENT_RATE_LIMIT)
def verify_card(
    request: Request,
    body: VerifyBody,
    api_key: str = Depends(verify_api_key),
    connector: ConnectorBase = Depends(get_connector),
):
    return _execute(connector.verify, body.card, body.options)


@app.post("/payments/{transaction_id}/capture")
@limiter.limit(PAYMENT_RATE_LIMIT)
def capture_payment(
    request: Request,
    transaction_id: str,
    body: AmountBody,
    api_key: str = Depends(verify_api_key),
    connector: ConnectorBase = Depends(get_connector),
):
    validate_transaction_id(transaction_id)
    return _execute(connector.capture, body.amount, transaction_id)


@app.post("/payments/{transaction_id}/void")
@limiter.limit(PAYMENT_RATE_LIMIT)
def void_payment(
    request: Request,
    transaction_id: str,
    api_key: str = Depends(verify_api_key),
    connector: ConnectorBase = Depends(get_connector),
):
    validate_transaction_id(transaction_id)
    return _execute(connector.void, transaction_id)


@app.post("/payments/{transaction_id}/refund")
@limiter.limit(PAYMENT_RATE_LIMIT)
def refund_payment(
    request: Request,
    transaction_id: str,
    body: AmountBody,
    api_key: str = Depends(verify_api_key),
    connector: ConnectorBase = Depends(get_connector),
):
    validate_transaction_id(transaction_id)
    return _execute(connector.refund, body.amount, transaction_id)


@app.get("/health")
def health(connector: ConnectorBase = Depends(get_connector)):
    return connector.health_check()
