"""Unit tests for password hashing and tokens."""

from datetime import timedelta

from jose import jwt

from wms.core.config import settings
from wms.core.security import (
    create_access_token, decode_access_token, get_password_hash, verify_password
)


class TestPasswords:
    def test_hash_round_trip(self):
        hashed = get_password_hash("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed)
        assert not verify_password("wrong-pass", hashed)

    def test_malformed_hash_does_not_verify(self):
        assert not verify_password("anything", "not-a-bcrypt-hash")


class TestTokens:
    def test_payload_carries_identity_and_roles(self):
        """The token holds id, email, username and role slugs."""
        token = create_access_token(user_id=7, email="a@example.com", username="a", role_names=["admin"])
        payload = decode_access_token(token)
        assert payload["id"] == 7
        assert payload["email"] == "a@example.com"
        assert payload["username"] == "a"
        assert payload["role_names"] == ["admin"]
        assert "exp" in payload

    def test_expired_token_is_rejected(self):
        token = create_access_token(
            user_id=1, email="a@example.com", username="a", role_names=[],
            expires_delta=timedelta(seconds=-5),
        )
        assert decode_access_token(token) is None

    def test_foreign_signature_is_rejected(self):
        token = jwt.encode({"id": 1}, "another-key", algorithm=settings.JWT_ALGORITHM)
        assert decode_access_token(token) is None

    def test_token_without_user_id_is_rejected(self):
        token = jwt.encode({"email": "a@example.com"}, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
        assert decode_access_token(token) is None

    def test_garbage_is_rejected(self):
        assert decode_access_token("not.a.token") is None
