import base64
import re
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import jwt
import pytest

from cmdb.utils.exceptions import InvalidTokenError
from cmdb.utils.security import (
    JWT_SECRET,
    api_key_matches,
    api_key_prefix,
    create_jwt_token,
    decode_jwt_token,
    generate_api_key,
    hash_api_key,
    hash_password,
    verify_password,
)


class TestAPIKeyPrimitives:
    def test_key_format(self):
        key = generate_api_key()

        assert key.startswith("cmdb_")
        body = key[len("cmdb_") :]
        assert "=" not in body
        assert re.fullmatch(r"[A-Za-z0-9_-]+", body)
        assert len(base64.urlsafe_b64decode(body + "==")) == 48

    def test_random_source_failure_propagates(self):
        with patch(
            "cmdb.utils.security.secrets.token_bytes",
            side_effect=OSError("entropy unavailable"),
        ):
            with pytest.raises(OSError):
                generate_api_key()

    def test_hash_and_compare(self):
        key = generate_api_key()
        key_hash = hash_api_key(key)

        assert re.fullmatch(r"[0-9a-f]{64}", key_hash)
        assert api_key_matches(key, key_hash)
        assert not api_key_matches(key + "x", key_hash)
        assert api_key_prefix(key) == key[:12]


class TestPasswords:
    def test_hash_and_verify(self):
        password_hash = hash_password("s3cret-pass")

        assert password_hash.startswith("$2")
        assert verify_password("s3cret-pass", password_hash)
        assert not verify_password("wrong", password_hash)

    def test_malformed_hash_does_not_verify(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False


class TestJWT:
    def test_round_trip(self):
        token = create_jwt_token("user-1", "u@example.com")
        payload = decode_jwt_token(token)

        assert payload["user_id"] == "user-1"
        assert payload["email"] == "u@example.com"

    def test_expired(self):
        token = jwt.encode(
            {
                "user_id": "user-1",
                "exp": datetime.now(timezone.utc) - timedelta(seconds=5),
            },
            JWT_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            decode_jwt_token(token)

    def test_wrong_secret(self):
        token = jwt.encode(
            {"user_id": "u", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            "some-other-secret",
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            decode_jwt_token(token)

    def test_unsigned_token_rejected(self):
        token = jwt.encode(
            {"user_id": "u", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            None,
            algorithm="none",
        )
        with pytest.raises(InvalidTokenError):
            decode_jwt_token(token)

    def test_hs512_accepted(self):
        token = jwt.encode(
            {"user_id": "u", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            JWT_SECRET,
            algorithm="HS512",
        )
        assert decode_jwt_token(token)["user_id"] == "u"

    @pytest.mark.parametrize("claims", [{}, {"user_id": ""}, {"user_id": 42}])
    def test_user_id_required(self, claims):
        token = jwt.encode(
            {**claims, "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            JWT_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            decode_jwt_token(token)

    def test_garbage(self):
        with pytest.raises(InvalidTokenError):
            decode_jwt_token("not.a.token")
