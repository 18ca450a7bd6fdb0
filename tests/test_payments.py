import pytest
import requests

from food_service.errors import PaymentGatewayError
from food_service.payments import LineItem, StripeCheckoutGateway, encode_checkout_form


class StubResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class StubSession:
    """Stands in for requests.Session and records every POST."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, **kwargs):
        self.requests.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


LINES = [LineItem("Veg Noodles", 96000, 2, "inr"), LineItem("Delivery Charges", 16000, 1, "inr")]


def test_encode_checkout_form_flattens_line_items():
    form = encode_checkout_form(LINES, "http://shop.test/ok", "http://shop.test/cancel")

    assert form == {
        "mode": "payment",
        "success_url": "http://shop.test/ok",
        "cancel_url": "http://shop.test/cancel",
        "line_items[0][price_data][currency]": "inr",
        "line_items[0][price_data][product_data][name]": "Veg Noodles",
        "line_items[0][price_data][unit_amount]": "96000",
        "line_items[0][quantity]": "2",
        "line_items[1][price_data][currency]": "inr",
        "line_items[1][price_data][product_data][name]": "Delivery Charges",
        "line_items[1][price_data][unit_amount]": "16000",
        "line_items[1][quantity]": "1",
    }


def test_create_checkout_session_posts_to_provider():
    session = StubSession(StubResponse(payload={"id": "cs_123", "url": "https://checkout.stripe.com/c/pay/cs_123"}))
    gateway = StripeCheckoutGateway("sk_test_abc", api_base="https://api.stripe.test/", timeout=3, session=session)

    result = gateway.create_checkout_session(LINES, "http://shop.test/ok", "http://shop.test/cancel")

    assert result.id == "cs_123"
    assert result.url == "https://checkout.stripe.com/c/pay/cs_123"
    url, kwargs = session.requests[0]
    assert url == "https://api.stripe.test/v1/checkout/sessions"
    assert kwargs["auth"] == ("sk_test_abc", "")
    assert kwargs["timeout"] == 3
    assert kwargs["data"]["line_items[0][quantity]"] == "2"


@pytest.mark.parametrize(
    "session",
    [
        StubSession(error=requests.exceptions.ConnectionError("connection refused")),
        StubSession(StubResponse(status_code=401, payload={"error": {"message": "Invalid API Key"}})),
        StubSession(StubResponse(payload=None)),
        StubSession(StubResponse(payload={"id": "cs_123"})),
    ],
    ids=["unreachable", "rejected", "not-json", "missing-url"],
)
def test_provider_failures_raise_gateway_error(session):
    gateway = StripeCheckoutGateway("sk_test_abc", session=session)

    with pytest.raises(PaymentGatewayError) as exc_info:
        gateway.create_checkout_session(LINES, "http://shop.test/ok", "http://shop.test/cancel")

    assert exc_info.value.status_code == 502
