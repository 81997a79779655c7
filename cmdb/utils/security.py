"""
Security and Authentication Utilities
"""

import base64
import hashlib
import hmac
import logging
import os
import secrets
from datetime import timedelta
from typing import Dict

import bcrypt
import jwt
from dotenv import load_dotenv

from cmdb.utils.datetime_utils import utcnow
from cmdb.utils.exceptions import InvalidTokenError

load_dotenv()
logger = logging.getLogger(__name__)

# Configuration
DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"
JWT_SECRET = os.getenv("JWT_SECRET", "")
JWT_ALGORITHM = "HS256"
# Only the HMAC family is accepted when decoding
JWT_ALLOWED_ALGORITHMS = ["HS256", "HS384", "HS512"]
JWT_EXPIRATION_HOURS = 24

if not JWT_SECRET:
    JWT_SECRET = DEFAULT_JWT_SECRET
    logger.warning(
        "Using default JWT secret. Set JWT_SECRET environment variable in production."
    )

API_KEY_PREFIX = "cmdb_"
API_KEY_RANDOM_BYTES = 48
API_KEY_DISPLAY_LENGTH = 12

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password with bcrypt at the default cost"""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time bcrypt comparison"""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or over-long password
        return False


def create_jwt_token(user_id: str, email: str) -> str:
    """Create JWT token for user"""
    now = utcnow()
    payload = {
        "user_id": user_id,
        "email": email,
        "exp": now + timedelta(hours=JWT_EXPIRATION_HOURS),
        "iat": now,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_jwt_token(token: str) -> Dict:
    """
    Decode and verify JWT token

    Raises:
        InvalidTokenError: expired, malformed, wrongly signed, signed with a
            non-HMAC algorithm, or missing the user_id claim
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=JWT_ALLOWED_ALGORITHMS,
            options={"require": ["exp", "user_id"]},
        )
    except jwt.PyJWTError:
        raise InvalidTokenError()

    if not isinstance(payload.get("user_id"), str) or not payload["user_id"]:
        raise InvalidTokenError()

    return payload


def generate_api_key() -> str:
    """
    Generate a secure API key: cmdb_ + 48 random bytes, base64url, no padding.

    Errors from the random source propagate to the caller.
    """
    raw = secrets.token_bytes(API_KEY_RANDOM_BYTES)
    encoded = base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")
    return f"{API_KEY_PREFIX}{encoded}"


def hash_api_key(api_key: str) -> str:
    """Hash API key for storage"""
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()


def api_key_prefix(api_key: str) -> str:
    """Display prefix stored next to the hash"""
    return api_key[:API_KEY_DISPLAY_LENGTH]


def api_key_matches(api_key: str, key_hash: str) -> bool:
    """Compare a presented key against a stored hash in constant time"""
    return hmac.compare_digest(hash_api_key(api_key), key_hash)
