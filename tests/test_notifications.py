import pytest

from storefront.core.exceptions import ForbiddenError, NotFoundError
from storefront.services import notifications


def _send(db, admin_token, user_id, title="Hello"):
    return notifications.create_notification(
        db, admin_token, {"user_id": user_id, "type": "promo", "title": title}
    )


def test_mark_all_read_touches_only_callers_unread(db, make_user):
    alice, alice_token = make_user()
    bob, bob_token = make_user()
    _, admin_token = make_user(role="admin")
    already_read = _send(db, admin_token, alice.id, "Old")
    notifications.mark_read(db, alice_token, already_read.id)
    for title in ("A", "B"):
        _send(db, admin_token, alice.id, title)
    _send(db, admin_token, bob.id, "For Bob")

    assert notifications.mark_all_read(db, alice_token) == 2
    assert notifications.unread_count(db, alice_token) == 0
    assert notifications.unread_count(db, bob_token) == 1
    assert all(n.read for n in notifications.list_notifications(db, alice_token).items)


def test_read_filter(db, customer, admin):
    user, token = customer
    _, admin_token = admin
    first = _send(db, admin_token, user.id, "First")
    _send(db, admin_token, user.id, "Second")
    notifications.mark_read(db, token, first.id)

    unread = notifications.list_notifications(db, token, read=False).items
    assert [n.title for n in unread] == ["Second"]
    read = notifications.list_notifications(db, token, read=True).items
    assert [n.title for n in read] == ["First"]


def test_other_users_notifications(db, make_user):
    alice, _ = make_user()
    _, bob_token = make_user()
    _, admin_token = make_user(role="admin")
    note = _send(db, admin_token, alice.id)

    assert notifications.get_notification(db, bob_token, note.id) is None
    with pytest.raises(ForbiddenError):
        notifications.mark_read(db, bob_token, note.id)
    with pytest.raises(ForbiddenError):
        notifications.remove_notification(db, bob_token, note.id)
    with pytest.raises(NotFoundError) as exc:
        notifications.mark_read(db, bob_token, 9999)
    assert exc.value.message == "Notification not found"


def test_sending_is_admin_only(db, customer):
    user, token = customer
    with pytest.raises(ForbiddenError):
        _send(db, token, user.id)


def test_bulk_create_and_remove_all(db, make_user):
    alice, alice_token = make_user()
    bob, bob_token = make_user()
    _, admin_token = make_user(role="admin")
    ids = notifications.bulk_create_notifications(
        db,
        admin_token,
        [
            {"user_id": alice.id, "type": "system", "title": "Maintenance tonight"},
            {"user_id": alice.id, "type": "order", "title": "Shipped", "metadata": {"order_id": 3}},
            {"user_id": bob.id, "type": "system", "title": "Maintenance tonight"},
        ],
    )
    assert len(ids) == 3
    assert notifications.get_notification(db, alice_token, ids[1]).metadata_ == {"order_id": 3}

    assert notifications.remove_notification(db, alice_token, ids[0]) == ids[0]
    assert notifications.remove_all_notifications(db, alice_token) == 1
    assert notifications.unread_count(db, bob_token) == 1


def test_sending_to_unknown_user(db, customer, admin):
    user, token = customer
    _, admin_token = admin
    with pytest.raises(NotFoundError) as exc:
        _send(db, admin_token, 9999)
    assert exc.value.message == "User not found with ID: 9999"

    rows = [
        {"user_id": user.id, "type": "promo", "title": "Weekend sale"},
        {"user_id": 9999, "type": "promo", "title": "Weekend sale"},
    ]
    with pytest.raises(NotFoundError):
        notifications.bulk_create_notifications(db, admin_token, rows)
    assert notifications.unread_count(db, token) == 0
