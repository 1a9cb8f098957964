"""PayHub connector and its transports."""

from .base import (
    ConnectorBase,
    CreditCard,
    Address,
    PaymentOptions,
    PaymentResult,
    StandardErrorCode,
    Money,
)
from .payhub_codes import (
    CVV_CODE_TRANSLATOR,
    AVS_CODE_TRANSLATOR,
    STANDARD_ERROR_CODE_MAPPING,
)
from .payhub_payload import MerchantContext, format_amount
from .payhub_connector import PayHubConnector, RefundFlow, RefundState
from .transport import Transport, RequestsTransport
from .simulator_transport import (
    SimulatorTransport,
    SimulatorConfig,
    SimulatorScenario,
    SimulatedTransaction,
)

__all__ = [
    # Base classes and models
    "ConnectorBase",
    "CreditCard",
    "Address",
    "PaymentOptions",
    "PaymentResult",
    "StandardErrorCode",
    "Money",
    "MerchantContext",
    "format_amount",
    # Code tables
    "CVV_CODE_TRANSLATOR",
    "AVS_CODE_TRANSLATOR",
    "STANDARD_ERROR_CODE_MAPPING",
    # Connector
    "PayHubConnector",
    "RefundFlow",
    "RefundState",
    # Transports
    "Transport",
    "RequestsTransport",
    "SimulatorTransport",
    "SimulatorConfig",
    "SimulatorScenario",
    "SimulatedTransaction",
]
