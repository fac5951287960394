"""Unit tests for wishlist, stock alert and address CRUD."""
import pytest

from shonenmart import crud, schemas


class TestWishlistCRUD:
    def test_add_and_list(self, db, make_product):
        first = make_product()
        second = make_product()

        crud.add_item(db, "user_abc", first.id)
        crud.add_item(db, "user_abc", second.id)
        crud.add_item(db, "someone_else", first.id)

        items = crud.get_items(db, "user_abc")
        assert [i.product_id for i in items] == [second.id, first.id]
        assert items[0].product.name == second.name

    def test_add_twice_raises_duplicate(self, db, make_product):
        product = make_product()
        crud.add_item(db, "user_abc", product.id)

        with pytest.raises(crud.DuplicateError):
            crud.add_item(db, "user_abc", product.id)

    def test_add_unknown_product(self, db):
        with pytest.raises(crud.ProductNotFoundError):
            crud.add_item(db, "user_abc", "missing")

    def test_remove(self, db, make_product):
        product = make_product()
        crud.add_item(db, "user_abc", product.id)

        crud.remove_item(db, "user_abc", product.id)

        assert crud.is_wishlisted(db, "user_abc", product.id) is False
        with pytest.raises(crud.NotFoundError):
            crud.remove_item(db, "user_abc", product.id)

    def test_batch_statuses(self, db, make_product):
        liked = make_product()
        other = make_product()
        crud.add_item(db, "user_abc", liked.id)

        statuses = crud.wishlist_statuses(db, "user_abc", [liked.id, other.id, "missing"])

        assert statuses == {liked.id: True, other.id: False, "missing": False}

    def test_deleting_product_removes_wishlist_rows(self, db, make_product):
        product = make_product()
        crud.add_item(db, "user_abc", product.id)

        crud.delete_product(db, product.id)

        assert crud.get_items(db, "user_abc") == []


    def test_share_token_is_stable_and_resolves(self, db, make_product):
        product = make_product()
        crud.add_item(db, "user_abc", product.id)

        token = crud.get_share_token(db, "user_abc")

        assert crud.get_share_token(db, "user_abc") == token
        owner, items = crud.get_shared_wishlist(db, token)
        assert owner.id == "user_abc"
        assert [i.product_id for i in items] == [product.id]

    def test_unknown_share_token(self, db):
        with pytest.raises(crud.NotFoundError):
            crud.get_shared_wishlist(db, "nope")

class TestStockAlertCRUD:
    def test_subscribe_and_status(self, db, make_product):
        product = make_product(stock=0)

        alert = crud.subscribe(db, "user_abc", product.id, "fan@example.com")

        assert alert.notified is False
        assert crud.is_subscribed(db, "user_abc", product.id) is True
        assert crud.alert_statuses(db, "user_abc", [product.id, "other"]) == {product.id: True, "other": False}

    def test_resubscribe_rearms_alert(self, db, make_product):
        product = make_product(stock=0)
        crud.subscribe(db, "user_abc", product.id, "old@example.com")
        crud.claim_restock_alerts(db, product.id)
        assert crud.is_subscribed(db, "user_abc", product.id) is False

        alert = crud.subscribe(db, "user_abc", product.id, "new@example.com")

        assert alert.notified is False
        assert alert.email == "new@example.com"
        assert len(crud.get_pending_alerts(db, "user_abc")) == 1

    def test_unsubscribe(self, db, make_product):
        product = make_product(stock=0)
        crud.subscribe(db, "user_abc", product.id, "fan@example.com")

        crud.unsubscribe(db, "user_abc", product.id)

        with pytest.raises(crud.NotFoundError):
            crud.unsubscribe(db, "user_abc", product.id)

    def test_subscribe_unknown_product(self, db):
        with pytest.raises(crud.ProductNotFoundError):
            crud.subscribe(db, "user_abc", "missing", "fan@example.com")

    def test_claim_marks_each_alert_once(self, db, make_product):
        product = make_product(stock=0)
        crud.subscribe(db, "user_a", product.id, "a@example.com")
        crud.subscribe(db, "user_b", product.id, "b@example.com")

        claimed = crud.claim_restock_alerts(db, product.id)

        assert sorted(a.email for a in claimed) == ["a@example.com", "b@example.com"]
        assert crud.claim_restock_alerts(db, product.id) == []


def _address(**overrides):
    data = {"name": "Home", "street": "1 Konoha St", "city": "Konoha", "state": "Fire", "zip_code": "00001"}
    data.update(overrides)
    return schemas.AddressCreate(**data)


class TestAddressCRUD:
    def test_first_address_becomes_default(self, db):
        address = crud.create_address(db, "user_abc", _address())
        assert address.is_default is True
        assert address.country == "US"

        second = crud.create_address(db, "user_abc", _address(name="Work"))
        assert second.is_default is False

    def test_new_default_unsets_previous(self, db):
        home = crud.create_address(db, "user_abc", _address())
        work = crud.create_address(db, "user_abc", _address(name="Work", is_default=True))

        addresses = crud.get_addresses(db, "user_abc")

        assert [a.id for a in addresses] == [work.id, home.id]
        assert [a.is_default for a in addresses] == [True, False]

    def test_update_default(self, db):
        home = crud.create_address(db, "user_abc", _address())
        work = crud.create_address(db, "user_abc", _address(name="Work"))

        crud.update_address(db, "user_abc", work.id, schemas.AddressUpdate(is_default=True, city="Suna"))

        db.expire_all()
        assert crud.get_addresses(db, "user_abc")[0].id == work.id
        assert crud.get_addresses(db, "user_abc")[0].city == "Suna"
        assert [a.is_default for a in crud.get_addresses(db, "user_abc")] == [True, False]
        assert home.id in {a.id for a in crud.get_addresses(db, "user_abc")}

    def test_other_users_address_is_not_found(self, db):
        home = crud.create_address(db, "user_abc", _address())

        with pytest.raises(crud.NotFoundError):
            crud.update_address(db, "intruder", home.id, schemas.AddressUpdate(city="Suna"))
        with pytest.raises(crud.NotFoundError):
            crud.delete_address(db, "intruder", home.id)

        crud.delete_address(db, "user_abc", home.id)
        assert crud.get_addresses(db, "user_abc") == []
