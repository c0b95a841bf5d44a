"""Builders shared by the payment tests."""

from shared.domain.value_objects import Money
from apps.payments.domain.signature import compute_signature
from apps.payments.gateway import SnapSession

SERVER_KEY = "test-secret"
PRICE = Money("25000.00", "IDR")


class FakeSnapGateway:
    """Records requests and answers with a fixed session, or raises ``error``."""

    def __init__(self, error=None):
        self.error = error
        self.requests = []

    def create_transaction(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return SnapSession(
            token=f"snap-{request.order_id}",
            redirect_url=f"https://app.sandbox.midtrans.com/snap/v2/vtweb/{request.order_id}",
        )


def notification_payload(order_id, transaction_status="settlement", *, status_code="200",
                         gross_amount="25000.00", server_key=SERVER_KEY, **extra):
    payload = {
        "order_id": order_id,
        "status_code": status_code,
        "gross_amount": gross_amount,
        "transaction_status": transaction_status,
        "transaction_id": f"tx-{order_id}",
        "payment_type": "bank_transfer",
        "fraud_status": "accept",
        "currency": "IDR",
        "signature_key": compute_signature(order_id, status_code, gross_amount, server_key),
    }
    payload.update(extra)
    return payload
