import pytest
import requests
from pydantic import ValidationError

from food_service.client import StorefrontClient, build_order_items, subtotal, total
from food_service.models import Order
from food_service.schemas import DeliveryAddress


@pytest.fixture
def food_list(make_food):
    return [make_food(name="Greek Salad", price=12).to_dict(), make_food(name="Veg Rolls", price=4).to_dict()]


@pytest.fixture
def delivery(address):
    return DeliveryAddress(**address)


def test_cart_helpers(food_list):
    salad, rolls = food_list
    cart = {salad["_id"]: 2, rolls["_id"]: 0}

    assert [i["name"] for i in build_order_items(food_list, cart)] == ["Greek Salad"]
    assert build_order_items(food_list, cart)[0]["quantity"] == 2
    assert subtotal(food_list, cart) == 24
    assert total(food_list, cart) == 26
    assert total(food_list, {}) == 0


def test_place_order_redirects_to_payment_page(client, db, make_user, food_list, delivery):
    user = make_user()
    storefront = StorefrontClient("http://testserver", token="tok", session=client)

    result = storefront.place_order(user.id, delivery, food_list, {food_list[0]["_id"]: 1})

    assert result.ok
    assert result.redirect_url == "https://checkout.test/pay/cs_test_1"
    assert db.query(Order).count() == 1


def test_missing_token_sends_back_to_cart(client, gateway, make_user, food_list, delivery):
    storefront = StorefrontClient("http://testserver", token=None, session=client)

    result = storefront.place_order(make_user().id, delivery, food_list, {food_list[0]["_id"]: 1})

    assert result.redirect_url == "/cart"
    assert gateway.calls == []


def test_empty_cart_shows_message(client, gateway, make_user, food_list, delivery):
    storefront = StorefrontClient("http://testserver", token="tok", session=client)

    result = storefront.place_order(make_user().id, delivery, food_list, {food_list[0]["_id"]: 0})

    assert not result.ok
    assert result.redirect_url is None
    assert result.error == "Your cart is empty!"
    assert gateway.calls == []


def test_server_message_is_shown(client, food_list, delivery):
    storefront = StorefrontClient("http://testserver", token="tok", session=client)

    result = storefront.place_order("not-a-user", delivery, food_list, {food_list[0]["_id"]: 1})

    assert not result.ok
    assert result.error == "Invalid User ID"


def test_transport_error_shows_generic_message(food_list, delivery):
    class DownSession:
        def post(self, url, **kwargs):
            raise requests.exceptions.ConnectionError("connection refused")

    storefront = StorefrontClient("http://localhost:4000", token="tok", session=DownSession())

    result = storefront.place_order("u", delivery, food_list, {food_list[0]["_id"]: 1})

    assert result.error == "Something went wrong. Please try again."


def test_address_requires_every_field(address):
    del address["phone"]

    with pytest.raises(ValidationError):
        DeliveryAddress(**address)
