"""Simulated PayHub API for exercising the connector without network calls."""

import json
import random
import time
import uuid
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Dict, Any, Optional, Tuple

from ..exceptions import NetworkError, ResponseError
from .transport import Transport

logger = logging.getLogger(__name__)


class SimulatorScenario(str, Enum):
    """Predefined test scenarios for the simulator."""
    SUCCESS = "success"
    DECLINE = "decline"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    EXPIRED_CARD = "expired_card"
    INVALID_CVC = "invalid_cvc"
    CALL_ISSUER = "call_issuer"
    PICKUP_CARD = "pickup_card"
    MALFORMED = "malformed"
    TIMEOUT = "timeout"


# scenario -> (RESPONSE_CODE, RESPONSE_TEXT)
DECLINE_RESPONSES: Dict[SimulatorScenario, Tuple[str, str]] = {
    SimulatorScenario.DECLINE: ("05", "Do not honor"),
    SimulatorScenario.INSUFFICIENT_FUNDS: ("51", "Insufficient funds"),
    SimulatorScenario.EXPIRED_CARD: ("54", "Expired card"),
    SimulatorScenario.INVALID_CVC: ("82", "Incorrect CVV"),
    SimulatorScenario.CALL_ISSUER: ("01", "Refer to card issuer"),
    SimulatorScenario.PICKUP_CARD: ("04", "Pick up card"),
}


@dataclass
class SimulatedTransaction:
    """In-memory representation of a simulated PayHub transaction."""
    id: str
    action: str
    status: str
    base_amount: Optional[Decimal] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    captured_amount: Optional[Decimal] = None


@dataclass
class SimulatorConfig:
    """Configuration for simulator behavior."""
    success_rate: float = 1.0  # 0.0 to 1.0
    timeout_rate: float = 0.0  # Rate of network timeouts
    delay_ms: int = 0  # Simulated response delay in ms
    seed: Optional[int] = None  # Random seed for reproducibility
    expected_token: Optional[str] = None  # Bearer token to enforce, if any


class SimulatorTransport(Transport):
    """
    In-memory stand-in for the PayHub v2 API.

    Features:
    - authOnly / sale / capture / void / refund / verify endpoints
    - Settlement, so void and refund behave like the real processor
    - Configurable success and timeout rates
    - Special card numbers for specific scenarios
    """

    # Special card numbers for triggering specific behaviors
    CARD_SUCCESS = "4111111111111111"
    CARD_DECLINE = "4000000000000002"
    CARD_INSUFFICIENT = "4000000000009995"
    CARD_EXPIRED = "4000000000000069"
    CARD_INVALID_CVC = "4000000000000127"
    CARD_CALL_ISSUER = "4000000000000010"
    CARD_PICKUP = "4000000000000044"
    CARD_MALFORMED = "4000000000000259"
    CARD_TIMEOUT = "4000000000000341"

    def __init__(self, config: Optional[SimulatorConfig] = None):
        """Initialize the simulator with optional configuration."""
        self.config = config or SimulatorConfig()
        self._transactions: Dict[str, SimulatedTransaction] = {}
        self._rng = random.Random(self.config.seed)
        self.requests: list = []
        logger.info("SimulatorTransport initialized")

    def _generate_id(self) -> str:
        """Generate a PayHub-style numeric transaction ID."""
        return str(uuid.uuid4().int % 10**12).zfill(12)

    def _apply_delay(self) -> None:
        if self.config.delay_ms > 0:
            time.sleep(self.config.delay_ms / 1000.0)

    def _determine_scenario(self, card_number: str) -> SimulatorScenario:
        """Determine scenario based on card number or random config."""
        card_scenarios = {
            self.CARD_SUCCESS: SimulatorScenario.SUCCESS,
            self.CARD_DECLINE: SimulatorScenario.DECLINE,
            self.CARD_INSUFFICIENT: SimulatorScenario.INSUFFICIENT_FUNDS,
            self.CARD_EXPIRED: SimulatorScenario.EXPIRED_CARD,
            self.CARD_INVALID_CVC: SimulatorScenario.INVALID_CVC,
            self.CARD_CALL_ISSUER: SimulatorScenario.CALL_ISSUER,
            self.CARD_PICKUP: SimulatorScenario.PICKUP_CARD,
            self.CARD_MALFORMED: SimulatorScenario.MALFORMED,
            self.CARD_TIMEOUT: SimulatorScenario.TIMEOUT,
        }
        if card_number in card_scenarios:
            return card_scenarios[card_number]
        if self._rng.random() < self.config.timeout_rate:
            return SimulatorScenario.TIMEOUT
        if self._rng.random() >= self.config.success_rate:
            return SimulatorScenario.DECLINE
        return SimulatorScenario.SUCCESS

    @staticmethod
    def _fail(status_code: int, response_code: str, text: str, txn_id: Optional[str] = None):
        body = {"RESPONSE_CODE": response_code, "RESPONSE_TEXT": text}
        if txn_id:
            body["TRANSACTION_ID"] = txn_id
        raise ResponseError(status_code, json.dumps(body))

    @staticmethod
    def _approve(txn_id: str, **extra: Any) -> str:
        body = {"RESPONSE_CODE": "00", "RESPONSE_TEXT": "Approved", "TRANSACTION_ID": txn_id}
        body.update(extra)
        return json.dumps(body)

    @staticmethod
    def _avs_code(card_data: Dict[str, Any]) -> str:
        has_street = bool(card_data.get("billing_address_1"))
        has_zip = bool(card_data.get("billing_zip"))
        if has_street and has_zip:
            return "Y"
        if has_zip:
            return "Z"
        if has_street:
            return "A"
        return "0"

    @staticmethod
    def _cvv_code(card_data: Dict[str, Any]) -> str:
        return "M" if card_data.get("cvv_data") else "P"

    def post(self, url: str, body: str, headers: Dict[str, str]) -> str:
        self._apply_delay()
        action = url.rstrip("/").rsplit("/", 1)[-1]
        payload = json.loads(body)
        self.requests.append((action, payload))

        if self.config.expected_token is not None:
            if headers.get("Authorization") != f"Bearer {self.config.expected_token}":
                self._fail(401, "401", "Unauthorized")

        handlers = {
            "authOnly": self._card_transaction,
            "sale": self._card_transaction,
            "verify": self._card_transaction,
            "capture": self._capture,
            "void": self._void,
            "refund": self._refund,
        }
        handler = handlers.get(action)
        if handler is None:
            self._fail(404, "404", f"Unknown action {action}")
        return handler(action, payload)

    def _card_transaction(self, action: str, payload: Dict[str, Any]) -> str:
        card_data = payload.get("card_data", {})
        scenario = self._determine_scenario(card_data.get("card_number", ""))

        if scenario == SimulatorScenario.TIMEOUT:
            raise NetworkError("Simulated timeout")
        if scenario == SimulatorScenario.MALFORMED:
            return "<html><body>502 Bad Gateway</body></html>"

        txn_id = self._generate_id()
        if scenario in DECLINE_RESPONSES:
            code, text = DECLINE_RESPONSES[scenario]
            self._fail(422, code, text, txn_id)

        base_amount = None
        if "bill" in payload:
            base_amount = Decimal(payload["bill"]["base_amount"])
        status = {"authOnly": "authorized", "sale": "captured", "verify": "verified"}[action]
        self._transactions[txn_id] = SimulatedTransaction(
            id=txn_id,
            action=action,
            status=status,
            base_amount=base_amount,
            captured_amount=base_amount if action == "sale" else None,
        )
        return self._approve(
            txn_id,
            AVS_RESULT_CODE=self._avs_code(card_data),
            VERIFICATION_RESULT_CODE=self._cvv_code(card_data),
        )

    def _lookup(self, payload: Dict[str, Any]) -> SimulatedTransaction:
        txn_id = payload.get("transaction_id")
        txn = self._transactions.get(txn_id)
        if not txn:
            self._fail(404, "25", "Unable to locate transaction")
        return txn

    def _capture(self, action: str, payload: Dict[str, Any]) -> str:
        txn = self._lookup(payload)
        if txn.status != "authorized":
            self._fail(400, "12", f"Cannot capture a {txn.status} transaction", txn.id)
        txn.captured_amount = Decimal(payload["bill"]["base_amount"])
        txn.status = "captured"
        return self._approve(txn.id)

    def _void(self, action: str, payload: Dict[str, Any]) -> str:
        txn = self._lookup(payload)
        if txn.status not in ("authorized", "captured"):
            self._fail(400, "12", f"Cannot void a {txn.status} transaction", txn.id)
        txn.status = "voided"
        return self._approve(txn.id)

    def _refund(self, action: str, payload: Dict[str, Any]) -> str:
        txn = self._lookup(payload)
        if txn.status != "settled":
            self._fail(400, "12", f"Cannot refund a {txn.status} transaction", txn.id)
        txn.status = "refunded"
        return self._approve(txn.id)

    def settle(self) -> int:
        """Settle every captured transaction, as PayHub's nightly batch does."""
        settled = 0
        for txn in self._transactions.values():
            if txn.status == "captured":
                txn.status = "settled"
                settled += 1
        return settled

    def get_transaction(self, transaction_id: str) -> Optional[SimulatedTransaction]:
        """Get a transaction from in-memory storage (for testing)."""
        return self._transactions.get(transaction_id)

    def clear_transactions(self) -> None:
        """Clear all stored transactions (for test cleanup)."""
        self._transactions.clear()
        self.requests.clear()
