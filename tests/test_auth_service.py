"""Unit tests for auth/service.py -- SessionService register / login / verify / current_user."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError

from core.errors import AuthError, ConflictError, NotFoundError, ValidationError


class TestRegister:
    def test_token_verifies_to_persisted_identity(self, sessions, user_store):
        user, token = sessions.register("new@example.com", "secret1", "New User")

        stored = user_store.get_by_email("new@example.com")
        claims = sessions.verify(token)
        assert claims.user_id == stored.id == user.id
        assert claims.email == "new@example.com"
        assert user.name == "New User"
        assert user.created_at

    def test_returned_user_has_no_password_hash(self, sessions, user_store):
        user, _token = sessions.register("new@example.com", "secret1")
        assert user.hashed_password is None
        assert user_store.get_by_email("new@example.com").hashed_password

    def test_name_is_optional(self, sessions):
        user, _token = sessions.register("new@example.com", "secret1")
        assert user.name is None

    def test_duplicate_email_conflicts(self, sessions):
        sessions.register("dup@example.com", "secret1")
        with pytest.raises(ConflictError):
            sessions.register("dup@example.com", "another1")

    @pytest.mark.parametrize(
        "email,password",
        [(None, "secret1"), ("", "secret1"), ("a@example.com", None), ("a@example.com", "")],
    )
    def test_missing_fields(self, sessions, email, password):
        with pytest.raises(ValidationError, match="required"):
            sessions.register(email, password)

    def test_short_password(self, sessions):
        with pytest.raises(ValidationError, match="at least 6"):
            sessions.register("a@example.com", "12345")

    def test_six_character_password_accepted(self, sessions):
        user, _token = sessions.register("a@example.com", "123456")
        assert user.id is not None

    def test_unique_constraint_race_maps_to_conflict(self, sessions, user_store):
        """If another request inserts the email after the pre-check, the store's constraint decides."""
        with patch.object(user_store, "create_user", side_effect=IntegrityError("INSERT", {}, Exception("UNIQUE"))):
            with pytest.raises(ConflictError):
                sessions.register("race@example.com", "secret1")


class TestLogin:
    def test_valid_credentials(self, sessions):
        registered, _ = sessions.register("a@example.com", "secret1")
        user, token = sessions.login("a@example.com", "secret1")
        assert user.id == registered.id
        assert user.hashed_password is None
        assert sessions.verify(token).user_id == registered.id

    def test_wrong_password_and_unknown_email_are_indistinguishable(self, sessions):
        sessions.register("a@example.com", "secret1")

        with pytest.raises(AuthError) as wrong_password:
            sessions.login("a@example.com", "wrong-pass")
        with pytest.raises(AuthError) as unknown_email:
            sessions.login("nobody@example.com", "secret1")

        assert wrong_password.value.message == unknown_email.value.message
        assert wrong_password.value.status_code == unknown_email.value.status_code == 401

    @pytest.mark.parametrize("email,password", [(None, "secret1"), ("a@example.com", None), ("", "")])
    def test_missing_fields(self, sessions, email, password):
        with pytest.raises(ValidationError):
            sessions.login(email, password)


class TestVerify:
    def test_garbage_token(self, sessions):
        with pytest.raises(AuthError, match="Invalid or expired token"):
            sessions.verify("garbage")


class TestCurrentUser:
    def test_resolves_live_record(self, sessions):
        _user, token = sessions.register("a@example.com", "secret1", "A")
        user = sessions.current_user(sessions.verify(token))
        assert user.email == "a@example.com"
        assert user.hashed_password is None

    def test_deleted_user_not_found(self, sessions, user_store):
        user, token = sessions.register("gone@example.com", "secret1")
        claims = sessions.verify(token)
        user_store.delete_user(user.id)

        with pytest.raises(NotFoundError):
            sessions.current_user(claims)
