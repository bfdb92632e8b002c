from urllib.parse import unquote

import pytest

from storefront.core.exceptions import (
    BusinessLogicError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from storefront.models import Order, Payment
from storefront.services import carts, orders, settings

ADDRESS = {
    "line1": "12 Oxford Street",
    "city": "Accra",
    "postal_code": "GA-123",
    "country": "Ghana",
    "phone": "0241234567",
}


def _client_order(total=5000):
    return {
        "items": [{"product_id": 1, "quantity": 1, "price_snapshot": 3000, "name": "Scarf"}],
        "subtotal": 3000,
        "shipping": 2000,
        "tax": 0,
        "total": total,
        "order_type": "delivery",
        "shipping_address": ADDRESS,
    }


def test_create_order_trusts_client_totals(db, customer):
    user, token = customer
    order = orders.create_order(db, token, _client_order(total=1))
    assert order.total == 1
    assert order.status == "pending"
    assert order.user_id == user.id
    assert len(order.order_number) == 8


def test_checkout_prices_cart_and_creates_payment(db, customer, make_product):
    user, token = customer
    product = make_product(price=15000)
    carts.add_cart_item(db, token, product.id, 2, product.price)

    result = orders.checkout(db, token, "delivery", ADDRESS)

    order, payment = result["order"], result["payment"]
    assert order.subtotal == 30000
    assert order.shipping == 2000
    assert order.tax == 0
    assert order.total == 32000
    assert order.items[0]["name"] == product.name
    assert order.payment_id == payment.id
    assert payment.order_id == order.id
    assert payment.amount == order.total
    assert payment.currency == "GHS"
    assert payment.status == "pending"
    assert carts.get_cart(db, token).items == []
    assert result["whatsapp_link"].startswith("https://wa.me/233553301044?text=")


def test_checkout_uses_saved_settings(db, customer, admin, make_product):
    _, token = customer
    _, admin_token = admin
    settings.update_settings(
        db, admin_token, {"free_shipping_threshold_pesewas": 1000, "tax_rate_percent": 12.5}
    )
    product = make_product(price=1004)
    carts.add_cart_item(db, token, product.id, 1, product.price)

    quote = orders.quote_checkout(db, token)
    assert quote == {
        "subtotal": 1004,
        "shipping": 0,
        "tax": 126,
        "total": 1130,
        "currency": "GHS",
        "item_count": 1,
    }
    assert orders.checkout(db, token, "pickup")["order"].total == 1130


def test_checkout_rejects_empty_cart(db, customer):
    _, token = customer
    with pytest.raises(BusinessLogicError) as exc:
        orders.checkout(db, token, "pickup")
    assert exc.value.message == "Cart is empty"


def test_checkout_rejects_missing_products(db, customer, make_product):
    _, token = customer
    product = make_product()
    carts.add_cart_item(db, token, product.id, 1, product.price)
    carts.add_cart_item(db, token, 9999, 1, 100)

    with pytest.raises(BusinessLogicError):
        orders.checkout(db, token, "pickup")
    db.rollback()
    assert db.query(Order).count() == 0
    assert len(carts.get_cart(db, token).items) == 2


def test_delivery_needs_full_address_and_phone(db, customer, make_product):
    _, token = customer
    product = make_product()
    carts.add_cart_item(db, token, product.id, 1, product.price)

    with pytest.raises(ValidationError):
        orders.checkout(db, token, "delivery", {"line1": "12 Oxford Street", "city": "Accra"})
    without_phone = {k: v for k, v in ADDRESS.items() if k != "phone"}
    with pytest.raises(ValidationError):
        orders.checkout(db, token, "delivery", without_phone)


def test_pickup_drops_partial_address(db, customer, make_product):
    _, token = customer
    product = make_product()
    carts.add_cart_item(db, token, product.id, 1, product.price)
    order = orders.checkout(db, token, "pickup", {"city": "Kumasi"})["order"]
    assert order.shipping_address is None
    assert order.order_type == "pickup"


def test_customers_only_see_their_own_orders(db, make_user):
    alice, alice_token = make_user()
    _, bob_token = make_user()
    _, admin_token = make_user(role="admin")
    mine = orders.create_order(db, alice_token, _client_order())
    theirs = orders.create_order(db, bob_token, _client_order())

    assert [o.id for o in orders.list_orders(db, alice_token).items] == [mine.id]
    assert {o.id for o in orders.list_orders(db, admin_token).items} == {mine.id, theirs.id}

    assert orders.get_order(db, alice_token, mine.id).id == mine.id
    with pytest.raises(ForbiddenError):
        orders.get_order(db, alice_token, theirs.id)
    assert orders.get_order(db, admin_token, 9999) is None


def test_customer_status_filter_applies_before_paging(db, customer, admin):
    _, token = customer
    _, admin_token = admin
    shipped = orders.create_order(db, token, _client_order())
    for _ in range(3):
        orders.create_order(db, token, _client_order())
    orders.update_order(db, admin_token, shipped.id, {"status": "shipped"})

    page = orders.list_orders(db, token, status="shipped", limit=2)
    assert [o.id for o in page.items] == [shipped.id]
    assert page.next_cursor is None


def test_order_pagination(db, customer):
    _, token = customer
    created = [orders.create_order(db, token, _client_order()).id for _ in range(5)]

    first = orders.list_orders(db, token, limit=2)
    assert [o.id for o in first.items] == created[::-1][:2]
    second = orders.list_orders(db, token, limit=2, cursor=first.next_cursor)
    assert [o.id for o in second.items] == created[::-1][2:4]
    last = orders.list_orders(db, token, limit=2, cursor=second.next_cursor)
    assert [o.id for o in last.items] == [created[0]]
    assert last.next_cursor is None


def test_invalid_cursor(db, customer):
    _, token = customer
    with pytest.raises(ValidationError):
        orders.list_orders(db, token, cursor="abc")


def test_order_updates_are_admin_only(db, customer, admin):
    _, token = customer
    _, admin_token = admin
    order = orders.create_order(db, token, _client_order())

    with pytest.raises(ForbiddenError):
        orders.update_order(db, token, order.id, {"status": "cancelled"})
    # Any status may follow any other.
    orders.update_order(db, admin_token, order.id, {"status": "delivered"})
    assert orders.update_order(db, admin_token, order.id, {"status": "pending"}).status == "pending"

    with pytest.raises(NotFoundError) as exc:
        orders.update_order(db, admin_token, 9999, {"status": "pending"})
    assert exc.value.message == "Order not found"


def test_bulk_status_and_remove(db, customer, admin):
    _, token = customer
    _, admin_token = admin
    ids = [orders.create_order(db, token, _client_order()).id for _ in range(2)]

    assert orders.bulk_update_order_status(db, admin_token, ids, "processing") == 2
    assert {o.status for o in orders.list_orders(db, admin_token).items} == {"processing"}

    assert orders.remove_order(db, admin_token, ids[0]) == ids[0]
    assert orders.get_order(db, admin_token, ids[0]) is None


def test_whatsapp_payment_link(db, make_user, make_product):
    _, token = make_user()
    _, stranger_token = make_user()
    product = make_product(price=2500)
    carts.add_cart_item(db, token, product.id, 2, product.price)
    order = orders.checkout(db, token, "delivery", ADDRESS)["order"]

    link = orders.whatsapp_payment_link(db, token, order.id)
    text = unquote(link.split("?text=", 1)[1])
    assert text == (
        f"Order #{order.order_number} - I've paid GH₵70.00 via MTN / Vodafone Cash / AirtelTigo. "
        "Delivery to: 12 Oxford Street, Accra, Ghana"
    )

    with pytest.raises(ForbiddenError):
        orders.whatsapp_payment_link(db, stranger_token, order.id)
    with pytest.raises(NotFoundError):
        orders.whatsapp_payment_link(db, token, 9999)


def test_order_reference_falls_back_to_id(db, customer):
    _, token = customer
    order = orders.create_order(db, token, _client_order())
    order.order_number = None
    db.commit()
    assert order.reference == str(order.id)[-8:]
    assert db.query(Payment).count() == 0


def test_order_payment_must_belong_to_the_order(db, customer, admin):
    _, token = customer
    _, admin_token = admin
    first = orders.create_order(db, token, _client_order())
    second = orders.create_order(db, token, _client_order())
    payment = Payment(order_id=second.id, amount=5000, currency="GHS", status="pending")
    db.add(payment)
    db.commit()

    with pytest.raises(NotFoundError):
        orders.update_order(db, admin_token, first.id, {"payment_id": 9999})
    with pytest.raises(NotFoundError):
        orders.update_order(db, admin_token, first.id, {"payment_id": payment.id})
    assert orders.update_order(db, admin_token, second.id, {"payment_id": payment.id}).payment_id == payment.id
