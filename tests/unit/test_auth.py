"""Unit tests for bearer tokens and roles."""
from shonenmart import crud
from shonenmart.auth import sign_token, verify_token
from shonenmart.models import UserRole


class TestTokens:
    def test_round_trip(self):
        assert verify_token(sign_token("user_abc", "s3cret"), "s3cret") == "user_abc"

    def test_user_ids_may_contain_dots(self):
        assert verify_token(sign_token("user.with.dots", "s3cret"), "s3cret") == "user.with.dots"

    def test_wrong_secret(self):
        assert verify_token(sign_token("user_abc", "s3cret"), "other") is None

    def test_forged_user_id(self):
        signature = sign_token("user_abc", "s3cret").split(".", 1)[1]
        assert verify_token(f"admin.{signature}", "s3cret") is None

    def test_unset_secret_rejects_everything(self):
        assert verify_token(sign_token("user_abc", ""), "") is None

    def test_garbage(self):
        assert verify_token("no-signature", "s3cret") is None
        assert verify_token("", "s3cret") is None


class TestRoles:
    def test_unknown_user_is_plain_user(self, db):
        assert crud.get_user_role(db, "nobody") == UserRole.USER

    def test_upsert_admin(self, db):
        crud.upsert_user(db, "admin_1", email="admin@example.com", role=UserRole.ADMIN)
        assert crud.get_user_role(db, "admin_1") == UserRole.ADMIN

        crud.upsert_user(db, "admin_1", name="Renamed")
        user = crud.get_user(db, "admin_1")
        assert user.role == UserRole.ADMIN
        assert user.email == "admin@example.com"
        assert user.name == "Renamed"

    def test_sync_never_demotes(self, db):
        crud.upsert_user(db, "admin_1", role=UserRole.ADMIN)

        user = crud.sync_user(db, "admin_1", email="admin@example.com")

        assert user.role == UserRole.ADMIN

    def test_sync_promotes_listed_email(self, db):
        user = crud.sync_user(db, "owner", email="Owner@Example.com", admin_emails=("owner@example.com",))
        assert user.role == UserRole.ADMIN

        assert crud.sync_user(db, "fan", email="fan@example.com", admin_emails=("owner@example.com",)).role == UserRole.USER

    def test_set_user_role(self, db):
        crud.sync_user(db, "fan")

        assert crud.set_user_role(db, "fan", UserRole.ADMIN).role == UserRole.ADMIN
        assert crud.set_user_role(db, "ghost", UserRole.ADMIN) is None
        assert [u.id for u in crud.get_users(db)] == ["fan"]
