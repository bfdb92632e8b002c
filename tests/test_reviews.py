import pytest

from storefront.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from storefront.services import reviews


def _review(product_id, rating=5):
    return {"product_id": product_id, "rating": rating, "title": "Lovely", "body": "Fits well."}


@pytest.mark.parametrize("rating", [0, 6, -1])
def test_rating_out_of_range_rejected_on_create(db, customer, make_product, rating):
    _, token = customer
    product = make_product()
    with pytest.raises(ValidationError) as exc:
        reviews.create_review(db, token, _review(product.id, rating))
    assert exc.value.message == "Rating must be 1-5"


def test_rating_out_of_range_rejected_on_update(db, customer, make_product):
    _, token = customer
    review = reviews.create_review(db, token, _review(make_product().id))
    with pytest.raises(ValidationError):
        reviews.update_review(db, token, review.id, {"rating": 9})


def test_new_reviews_wait_for_approval(db, customer, admin, make_product):
    _, token = customer
    _, admin_token = admin
    product = make_product()
    review = reviews.create_review(db, token, _review(product.id))
    assert review.status == "pending"

    assert reviews.list_reviews_by_product(db, product.id).items == []
    with pytest.raises(ForbiddenError):
        reviews.list_reviews_by_product(db, product.id, token, status="pending")
    pending = reviews.list_reviews_by_product(db, product.id, admin_token, status="pending")
    assert [r.id for r in pending.items] == [review.id]

    reviews.bulk_update_review_status(db, admin_token, [review.id], "approved")
    assert [r.id for r in reviews.list_reviews_by_product(db, product.id).items] == [review.id]


def test_only_admin_sets_status(db, customer, admin, make_product):
    _, token = customer
    _, admin_token = admin
    review = reviews.create_review(db, token, _review(make_product().id))

    with pytest.raises(ForbiddenError):
        reviews.update_review(db, token, review.id, {"status": "approved"})
    edited = reviews.update_review(db, token, review.id, {"rating": 4, "body": "Still good."})
    assert (edited.rating, edited.body, edited.status) == (4, "Still good.", "pending")
    assert reviews.update_review(db, admin_token, review.id, {"status": "rejected"}).status == "rejected"


def test_author_or_admin_may_delete(db, make_user, make_product):
    _, author_token = make_user()
    _, other_token = make_user()
    _, admin_token = make_user(role="admin")
    product = make_product()
    first = reviews.create_review(db, author_token, _review(product.id))
    second = reviews.create_review(db, author_token, _review(product.id))

    with pytest.raises(ForbiddenError):
        reviews.remove_review(db, other_token, first.id)
    assert reviews.remove_review(db, author_token, first.id) == first.id
    assert reviews.remove_review(db, admin_token, second.id) == second.id
    with pytest.raises(NotFoundError) as exc:
        reviews.remove_review(db, admin_token, second.id)
    assert exc.value.message == "Review not found"


def test_list_by_user(db, make_user, make_product):
    _, alice_token = make_user()
    _, bob_token = make_user()
    product = make_product()
    mine = reviews.create_review(db, alice_token, _review(product.id))
    reviews.create_review(db, bob_token, _review(product.id))

    assert [r.id for r in reviews.list_reviews_by_user(db, alice_token).items] == [mine.id]
    assert reviews.get_review(db, mine.id).id == mine.id


def test_review_for_unknown_product_or_order(db, customer, make_product):
    _, token = customer
    with pytest.raises(NotFoundError) as exc:
        reviews.create_review(db, token, _review(9999))
    assert exc.value.message == "Product not found with ID: 9999"

    data = dict(_review(make_product().id), order_id=9999)
    with pytest.raises(NotFoundError):
        reviews.create_review(db, token, data)
