# payhub_sdk package
__version__ = "0.1.0"

from .connectors import (
    PayHubConnector,
    CreditCard,
    Address,
    PaymentOptions,
    PaymentResult,
    StandardErrorCode,
    RequestsTransport,
    SimulatorTransport,
    SimulatorConfig,
)
from .exceptions import (
    PayHubError,
    ConfigurationError,
    TransportError,
    NetworkError,
    ResponseError,
)
