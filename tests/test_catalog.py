import pytest

from storefront.core.exceptions import ForbiddenError, NotFoundError, UnauthorizedError
from storefront.services import categories, products


def _product(slug="wax-print-dress", **overrides):
    data = {
        "name": "Wax Print Dress",
        "slug": slug,
        "description": "Ankara wax print, midi length.",
        "price": 32000,
        "status": "active",
        "stock": 4,
    }
    data.update(overrides)
    return data


def test_category_crud(db, admin):
    _, token = admin
    created = categories.create_category(db, token, {"name": "Fashion", "slug": "fashion"})
    assert categories.get_category_by_slug(db, "fashion").id == created.id

    updated = categories.update_category(db, token, created.id, {"description": "Clothes"})
    assert updated.description == "Clothes"

    assert categories.remove_category(db, token, created.id) == created.id
    assert categories.get_category(db, created.id) is None


def test_category_writes_need_admin(db, customer):
    _, token = customer
    with pytest.raises(ForbiddenError):
        categories.create_category(db, token, {"name": "X", "slug": "x"})
    with pytest.raises(UnauthorizedError):
        categories.create_category(db, None, {"name": "X", "slug": "x"})


def test_bulk_create_categories_lists_newest_first(db, admin):
    _, token = admin
    ids = categories.bulk_create_categories(
        db, token, [{"name": "A", "slug": "a"}, {"name": "B", "slug": "b"}]
    )
    page = categories.list_categories(db)
    assert [c.id for c in page.items] == list(reversed(ids))
    assert page.next_cursor is None


def test_duplicate_slug_is_accepted(db, admin):
    _, token = admin
    first = products.create_product(db, token, _product())
    second = products.create_product(db, token, _product(name="Wax Print Dress II"))
    assert first.id != second.id
    assert products.get_product_by_slug(db, "wax-print-dress").id == second.id


def test_sku_generated_when_missing(db, admin):
    _, token = admin
    generated = products.create_product(db, token, _product())
    assert len(generated.sku) == 6 and generated.sku.isdigit()

    given = products.create_product(db, token, _product(slug="other", sku="CUSTOM-1"))
    assert given.sku == "CUSTOM-1"


def test_listing_is_role_gated(db, admin, customer, make_product):
    _, admin_token = admin
    _, customer_token = customer
    make_product(slug="draft", status="draft")
    make_product(slug="active", status="active")
    make_product(slug="sold-out", status="out_of_stock")
    make_product(slug="old", status="archived")

    public = {p.slug for p in products.list_products(db, None).items}
    assert public == {"active", "sold-out"}
    # Asking for drafts as a customer still only returns store-visible rows.
    assert products.list_products(db, customer_token, status="draft").items == []

    everything = {p.slug for p in products.list_products(db, admin_token).items}
    assert everything == {"draft", "active", "sold-out", "old"}
    drafts = products.list_products(db, admin_token, status="draft").items
    assert [p.slug for p in drafts] == ["draft"]


def test_list_for_store_filters_by_category(db, make_product):
    make_product(slug="phone", category_ids=[1])
    make_product(slug="shirt", category_ids=[2])
    make_product(slug="both", category_ids=[1, 2])
    make_product(slug="hidden", status="out_of_stock", category_ids=[1])

    assert {p.slug for p in products.list_for_store(db)} == {"phone", "shirt", "both"}
    assert [p.slug for p in products.list_for_store(db, "1")] == ["both", "phone"]
    assert len(products.list_for_store(db, "1", limit=1)) == 1


def test_get_by_ids_skips_missing(db, make_product):
    a = make_product(slug="a")
    b = make_product(slug="b")
    found = products.get_products_by_ids(db, [b.id, 9999, a.id])
    assert [p.id for p in found] == [b.id, a.id]
    assert products.get_products_by_ids(db, []) == []


def test_bulk_operations(db, admin, make_product):
    _, token = admin
    a = make_product(slug="a")
    b = make_product(slug="b")

    assert products.bulk_update_product_status(db, token, [a.id, b.id], "archived") == 2
    assert products.get_product(db, a.id).status == "archived"

    products.bulk_update_products(db, token, [{"product_id": a.id, "price": 500}])
    assert products.get_product(db, a.id).price == 500

    with pytest.raises(NotFoundError):
        products.bulk_delete_products(db, token, [a.id, 9999])
    db.rollback()

    assert products.bulk_delete_products(db, token, [a.id, b.id]) == 2
    assert products.get_product(db, b.id) is None


def test_bulk_create_products_gives_distinct_skus(db, admin):
    _, token = admin
    ids = products.bulk_create_products(db, token, [_product(slug=f"p{i}") for i in range(5)])
    skus = {products.get_product(db, pid).sku for pid in ids}
    assert len(skus) == 5
