from datetime import timedelta

import pytest
from sqlalchemy import select

from storefront.core.exceptions import (
    ConflictError,
    ForbiddenError,
    UnauthorizedError,
    ValidationError,
)
from storefront.db import utcnow
from storefront.models import Cart, User, UserSession
from storefront.services import auth, carts, users

from conftest import PASSWORD


def test_register_lowercases_email_and_hashes_password(db):
    result = users.register(db, "Kofi.Boateng@Example.com", PASSWORD, "Kofi Boateng")

    user = result["user"]
    assert user.email == "kofi.boateng@example.com"
    assert user.role == "customer"
    assert user.password_hash != PASSWORD
    assert auth.get_current_user(db, result["session_token"]).id == user.id


def test_register_rejects_duplicate_email_case_insensitively(db, customer):
    user, _ = customer
    with pytest.raises(ConflictError) as exc:
        users.register(db, user.email.upper(), PASSWORD, "Someone Else")
    assert exc.value.message == "Email already registered"


def test_login_with_wrong_password(db, customer):
    user, _ = customer
    with pytest.raises(UnauthorizedError) as exc:
        users.login(db, user.email, "not-the-password")
    assert exc.value.message == "Invalid email or password"


def test_login_unknown_email(db):
    with pytest.raises(UnauthorizedError):
        users.login(db, "nobody@example.com", PASSWORD)


def test_login_opens_a_new_session(db, customer):
    user, first_token = customer
    result = users.login(db, user.email, PASSWORD, user_agent="pytest", ip="127.0.0.1")
    assert result["session_token"] != first_token
    sessions = db.execute(select(UserSession).where(UserSession.user_id == user.id)).scalars().all()
    assert len(sessions) == 2


def test_logout_is_idempotent(db, customer):
    _, token = customer
    users.logout(db, token)
    users.logout(db, token)
    assert auth.get_current_user(db, token) is None


@pytest.mark.parametrize("token", [None, "", "   ", "no-such-token"])
def test_unusable_tokens_resolve_to_no_user(db, token):
    assert auth.get_current_user(db, token) is None
    with pytest.raises(UnauthorizedError):
        auth.require_user(db, token)


def test_expired_session_is_rejected_and_pruned(db, customer):
    user, token = customer
    session = db.execute(select(UserSession).where(UserSession.token == token)).scalar_one()
    session.expires_at = utcnow() - timedelta(minutes=1)
    db.commit()

    assert users.get_me(db, token) is None
    assert auth.prune_expired_sessions(db) == 1


def test_require_admin_refuses_customers(db, customer):
    _, token = customer
    with pytest.raises(ForbiddenError) as exc:
        auth.require_admin(db, token)
    assert exc.value.message == "Forbidden: admin required"


def test_list_users_is_admin_only(db, customer, admin):
    _, customer_token = customer
    _, admin_token = admin
    with pytest.raises(ForbiddenError):
        users.list_users(db, customer_token)
    page = users.list_users(db, admin_token)
    assert {u.role for u in page.items} == {"customer", "admin"}


def test_get_user_self_or_admin(db, make_user):
    alice, alice_token = make_user()
    bob, _ = make_user()
    _, admin_token = make_user(role="admin")

    assert users.get_user(db, alice_token, alice.id).id == alice.id
    assert users.get_user(db, admin_token, bob.id).id == bob.id
    assert users.get_user(db, admin_token, 9999) is None
    with pytest.raises(ForbiddenError):
        users.get_user(db, alice_token, bob.id)


def test_customer_cannot_change_own_role(db, customer):
    user, token = customer
    with pytest.raises(ForbiddenError):
        users.update_user(db, token, user.id, {"role": "admin"})
    updated = users.update_user(db, token, user.id, {"name": "Ama Owusu", "phone": "0241234567"})
    assert updated.name == "Ama Owusu"
    assert updated.role == "customer"


def test_admin_can_promote(db, customer, admin):
    user, _ = customer
    _, admin_token = admin
    assert users.update_user(db, admin_token, user.id, {"role": "admin"}).role == "admin"


def test_change_password(db, customer):
    user, token = customer
    with pytest.raises(ValidationError) as exc:
        users.change_password(db, token, "wrong-password", "new-password-2")
    assert exc.value.message == "Current password is wrong"

    users.change_password(db, token, PASSWORD, "new-password-2")
    assert users.login(db, user.email, "new-password-2")["user"].id == user.id


def test_remove_and_bulk_delete(db, make_user):
    alice, alice_token = make_user()
    bob, _ = make_user()
    carol, _ = make_user()
    _, admin_token = make_user(role="admin")

    with pytest.raises(ForbiddenError):
        users.remove_user(db, alice_token, bob.id)
    assert users.remove_user(db, alice_token, alice.id) == alice.id
    assert users.bulk_delete_users(db, admin_token, [bob.id, carol.id]) == 2
    assert db.execute(select(User).where(User.role == "customer")).first() is None


def test_removed_users_token_does_not_carry_over_to_a_new_account(db, make_user):
    leaver, leaver_token = make_user()
    _, admin_token = make_user(role="admin")

    users.remove_user(db, admin_token, leaver.id)
    newcomer = users.register(db, "newcomer@example.com", PASSWORD, "Newcomer")

    assert auth.get_current_user(db, leaver_token) is None
    assert auth.get_current_user(db, newcomer["session_token"]).email == "newcomer@example.com"
    assert db.execute(select(UserSession).where(UserSession.token == leaver_token)).first() is None


def test_bulk_delete_revokes_sessions_and_cascades_carts(db, make_user, make_product):
    alice, alice_token = make_user()
    bob, bob_token = make_user()
    _, admin_token = make_user(role="admin")
    carts.add_cart_item(db, alice_token, make_product().id, 1, 10000)

    users.bulk_delete_users(db, admin_token, [alice.id, bob.id])
    db.expire_all()

    assert auth.get_current_user(db, alice_token) is None
    assert auth.get_current_user(db, bob_token) is None
    assert db.execute(select(Cart)).first() is None
