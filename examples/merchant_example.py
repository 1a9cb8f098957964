"""
Simple merchant usage example (server-side). Runs against the in-memory
simulator; drop the ``transport`` argument and set PAYHUB_* variables to talk
to PayHub's demo environment.
"""
from payhub_sdk.connectors import (
    PayHubConnector,
    CreditCard,
    PaymentOptions,
    Address,
    SimulatorTransport,
)


def run():
    simulator = SimulatorTransport()
    connector = PayHubConnector(
        orgid="10005",
        username="merchant",
        password="demo-api-token",
        tid="5",
        test=True,
        transport=simulator,
    )
    card = CreditCard(number=SimulatorTransport.CARD_SUCCESS, month=9, year=2030, verification_value="123")
    options = PaymentOptions(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        billing_address=Address(address1="1 Main St", city="Oakland", state="CA", zip="94607"),
        invoice_number="INV-1001",
    )

    auth = connector.authorize(1000, card, options)
    print("Authorize:", auth.model_dump_json())

    capture = connector.capture(1000, auth.transaction_id)
    print("Capture:", capture.model_dump_json())

    # Unsettled: refund is satisfied by a void
    print("Refund before settlement:", connector.refund(1000, auth.transaction_id).model_dump_json())

    sale = connector.purchase(2500, card, options)
    simulator.settle()
    # Settled: the void is rejected and a real refund is issued
    print("Refund after settlement:", connector.refund(2500, sale.transaction_id).model_dump_json())

    declined = connector.purchase(1000, card.model_copy(update={"number": SimulatorTransport.CARD_DECLINE}))
    print("Declined:", declined.message, declined.error_code)


if __name__ == "__main__":
    run()
