import os
import enum
import logging
from typing import Callable, Dict, Any, Optional

from ..exceptions import ConfigurationError, ResponseError
from .base import ConnectorBase, CreditCard, Money, OptionsArg, PaymentResult, coerce_options
from .payhub_payload import (
    MerchantContext,
    add_bill,
    add_card_data,
    add_customer_data,
    add_reference,
    build_base,
    serialize,
)
from .payhub_response import interpret
from .transport import DEFAULT_TIMEOUT, RequestsTransport, Transport

logger = logging.getLogger(__name__)

LIVE_URL = "https://api.payhub.com/api/v2"
# PayHub routes demo traffic through the live host; "mode": "demo" marks it
TEST_URL = LIVE_URL

# constructor argument -> environment variable
CREDENTIAL_ENV_VARS = {
    "orgid": "PAYHUB_ORGID",
    "username": "PAYHUB_USERNAME",
    "password": "PAYHUB_PASSWORD",
    "tid": "PAYHUB_TID",
}

_TRUTHY = ("1", "true", "yes", "on")


class RefundState(str, enum.Enum):
    ATTEMPTING_VOID = "attempting_void"
    ISSUING_REFUND = "issuing_refund"
    DONE = "done"


class RefundFlow:
    """
    Refund as void-then-refund.

    An unsettled transaction can only be voided and a settled one can only be
    refunded, so the void is tried first. A successful void is the final
    result; otherwise a genuine refund is issued.
    """

    def __init__(
        self,
        transaction_id: str,
        void: Callable[[str], PaymentResult],
        refund: Callable[[str], PaymentResult],
    ):
        self.transaction_id = transaction_id
        self._void = void
        self._refund = refund
        self.state = RefundState.ATTEMPTING_VOID
        self.result: Optional[PaymentResult] = None

    def step(self) -> RefundState:
        if self.state is RefundState.ATTEMPTING_VOID:
            result = self._void(self.transaction_id)
            if result.success:
                self.result = result
                self.state = RefundState.DONE
            else:
                logger.info(f"Void of {self.transaction_id} failed, issuing refund")
                self.state = RefundState.ISSUING_REFUND
        elif self.state is RefundState.ISSUING_REFUND:
            self.result = self._refund(self.transaction_id)
            self.state = RefundState.DONE
        else:
            raise RuntimeError("Refund flow has already completed")
        return self.state

    def run(self) -> PaymentResult:
        while self.state is not RefundState.DONE:
            self.step()
        return self.result


class PayHubConnector(ConnectorBase):
    """
    Connector for the PayHub v2 JSON API.

    Credentials may be passed directly or read from ``PAYHUB_*`` environment
    variables; explicit arguments win. The connector only holds immutable
    configuration so one instance can be shared between threads.
    """

    display_name = "PayHub"
    homepage_url = "http://www.payhub.com/"
    supported_countries = ("US",)
    default_currency = "USD"
    supported_cardtypes = ("visa", "master", "american_express", "discover")

    def __init__(
        self,
        orgid: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        tid: Optional[str] = None,
        test: Optional[bool] = None,
        transport: Optional[Transport] = None,
        base_url: Optional[str] = None,
    ):
        supplied = {"orgid": orgid, "username": username, "password": password, "tid": tid}
        credentials = {
            name: supplied[name] or os.getenv(env_var, "")
            for name, env_var in CREDENTIAL_ENV_VARS.items()
        }
        missing = [name for name, value in credentials.items() if not value]
        if missing:
            env_names = ", ".join(CREDENTIAL_ENV_VARS[name] for name in missing)
            raise ConfigurationError(
                f"Missing required PayHub credentials: {', '.join(missing)} (set {env_names})"
            )

        self._merchant = MerchantContext(
            organization_id=credentials["orgid"],
            terminal_id=credentials["tid"],
        )
        # username is required by PayHub onboarding but not used by the v2 API
        self._username = credentials["username"]
        self._password = credentials["password"]

        if test is None:
            test = os.getenv("PAYHUB_TEST_MODE", "").strip().lower() in _TRUTHY
        self._test = test
        self._base_url = (base_url or os.getenv("PAYHUB_BASE_URL") or LIVE_URL).rstrip("/")

        if transport is None:
            raw_timeout = os.getenv("PAYHUB_TIMEOUT", DEFAULT_TIMEOUT)
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                raise ConfigurationError(
                    f"PAYHUB_TIMEOUT must be a number of seconds, got {raw_timeout!r}"
                ) from e
            transport = RequestsTransport(timeout=timeout)
        self._transport = transport

        logger.info(
            f"PayHubConnector initialized for organization {self._merchant.organization_id} "
            f"terminal {self._merchant.terminal_id} (test={self._test})"
        )

    @property
    def test(self) -> bool:
        return self._test

    @property
    def merchant(self) -> MerchantContext:
        return self._merchant

    def authorize(self, amount: Money, card: CreditCard, options: OptionsArg = None) -> PaymentResult:
        options = coerce_options(options)
        post = self._setup_post()
        post = add_card_data(post, card, options.resolved_address)
        post = self._add_bill_from_options(post, amount, options)
        post = add_customer_data(post, options)
        return self._commit(post, "authOnly")

    def purchase(self, amount: Money, card: CreditCard, options: OptionsArg = None) -> PaymentResult:
        options = coerce_options(options)
        post = self._setup_post()
        post = add_card_data(post, card, options.resolved_address)
        post = self._add_bill_from_options(post, amount, options)
        post = add_customer_data(post, options)
        return self._commit(post, "sale")

    def capture(self, amount: Money, transaction_id: str, options: OptionsArg = None) -> PaymentResult:
        # partial capture of tax/shipping is not supported by PayHub; base amount only
        post = self._setup_post()
        post = add_reference(post, transaction_id)
        post = add_bill(post, amount)
        return self._commit(post, "capture")

    def void(self, transaction_id: str, options: OptionsArg = None) -> PaymentResult:
        post = add_reference(self._setup_post(), transaction_id)
        return self._commit(post, "void")

    def refund(self, amount: Money, transaction_id: str, options: OptionsArg = None) -> PaymentResult:
        flow = RefundFlow(transaction_id, void=self.void, refund=self._issue_refund)
        return flow.run()

    def verify(self, card: CreditCard, options: OptionsArg = None) -> PaymentResult:
        options = coerce_options(options)
        post = self._setup_post()
        post = add_card_data(post, card, options.resolved_address)
        post = add_customer_data(post, options)
        return self._commit(post, "verify")

    def health_check(self) -> Dict[str, Any]:
        return {
            "ok": True,
            "provider": "payhub",
            "test": self._test,
            "base_url": self._base_url,
        }

    def url_for_action(self, action: str) -> str:
        return f"{self._base_url}/{action}"

    def request_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._password}",
            "Accept": "application/json",
            "cache-control": "no-cache",
        }

    def _setup_post(self) -> Dict[str, Any]:
        return build_base(self._merchant, self._test)

    @staticmethod
    def _add_bill_from_options(post: Dict[str, Any], amount: Money, options) -> Dict[str, Any]:
        return add_bill(
            post,
            amount,
            tax_amount=options.tax_amount,
            shipping_amount=options.shipping_amount,
            invoice_number=options.invoice_number,
        )

    def _issue_refund(self, transaction_id: str) -> PaymentResult:
        post = add_reference(self._setup_post(), transaction_id)
        return self._commit(post, "refund")

    def _commit(self, post: Dict[str, Any], action: str) -> PaymentResult:
        url = self.url_for_action(action)
        logger.info(f"Sending PayHub {action} request")
        try:
            raw_response = self._transport.post(url, serialize(post), self.request_headers())
        except ResponseError as e:
            if e.body is None:
                raise
            return interpret(e.body, transport_succeeded=False, test=self._test)
        return interpret(raw_response, transport_succeeded=True, test=self._test)
