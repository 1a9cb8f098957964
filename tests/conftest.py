"""Shared test fixtures and configuration."""

import os
import json
import pytest
from unittest.mock import MagicMock
from typing import Dict, Any

# Set up test environment variables before importing modules
os.environ.setdefault("API_KEY", "test_api_key_12345")
os.environ.setdefault("PAYHUB_API_RATE_LIMIT", "1000/minute")

from payhub_sdk.connectors import (
    PayHubConnector,
    CreditCard,
    Address,
    SimulatorTransport,
    Transport,
)

PAYHUB_ENV_VARS = ("PAYHUB_ORGID", "PAYHUB_USERNAME", "PAYHUB_PASSWORD", "PAYHUB_TID",
                   "PAYHUB_TEST_MODE", "PAYHUB_BASE_URL", "PAYHUB_TIMEOUT")


@pytest.fixture(autouse=True)
def clean_payhub_env():
    """Keep PAYHUB_* variables from the developer's shell out of the tests."""
    saved = {name: os.environ.pop(name) for name in PAYHUB_ENV_VARS if name in os.environ}
    yield
    for name in PAYHUB_ENV_VARS:
        os.environ.pop(name, None)
    os.environ.update(saved)


@pytest.fixture
def credentials() -> Dict[str, str]:
    """Return valid PayHub credentials."""
    return {
        "orgid": "10005",
        "username": "payhub_user",
        "password": "2a5d6a73-d294-4fba-bfba-957f4948c1a8",
        "tid": "5",
    }


@pytest.fixture
def card() -> CreditCard:
    """Return a valid test card."""
    return CreditCard(number="4111111111111111", month=9, year=2030, verification_value="999")


@pytest.fixture
def billing_address() -> Address:
    """Return a complete billing address."""
    return Address(address1="456 My Street", address2="Apt 1", city="Ottawa", state="ON", zip="K1C2N6")


@pytest.fixture
def mock_transport():
    """Transport double returning an approval unless reconfigured."""
    transport = MagicMock(spec=Transport)
    transport.post.return_value = json.dumps({
        "RESPONSE_CODE": "00",
        "RESPONSE_TEXT": "Approved",
        "TRANSACTION_ID": "abc123",
        "AVS_RESULT_CODE": "Y",
        "VERIFICATION_RESULT_CODE": "M",
    })
    return transport


@pytest.fixture
def connector(credentials, mock_transport) -> PayHubConnector:
    """Live-mode connector wired to the mock transport."""
    return PayHubConnector(**credentials, test=False, transport=mock_transport)


@pytest.fixture
def simulator() -> SimulatorTransport:
    return SimulatorTransport()


@pytest.fixture
def sim_connector(credentials, simulator) -> PayHubConnector:
    """Demo-mode connector wired to the in-memory simulator."""
    return PayHubConnector(**credentials, test=True, transport=simulator)


def sent_payload(transport, call_index: int = -1) -> Dict[str, Any]:
    """Decode the JSON body of a recorded transport.post call."""
    args, kwargs = transport.post.call_args_list[call_index]
    body = kwargs.get("body", args[1] if len(args) > 1 else None)
    return json.loads(body)


def sent_url(transport, call_index: int = -1) -> str:
    args, kwargs = transport.post.call_args_list[call_index]
    return kwargs.get("url", args[0] if args else None)
