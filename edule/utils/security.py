"""
Password hashing and session token helpers

Passwords are hashed with werkzeug's ``generate_password_hash`` using
``pbkdf2:sha256:<iterations>``. Session tokens are random URL-safe strings
handed to the client once; only their SHA-256 digest is persisted.
"""

import hashlib
import hmac
import secrets

from werkzeug.security import check_password_hash, generate_password_hash

# Method prefixes werkzeug writes in front of ``$salt$hash``
HASH_METHODS = ("pbkdf2:", "scrypt:")


def hash_password(password: str, iterations: int = 260000) -> str:
    return generate_password_hash(password, method=f"pbkdf2:sha256:{iterations}")


def is_password_hash(value: str) -> bool:
    return isinstance(value, str) and value.startswith(HASH_METHODS)


def verify_password(password: str, stored: str) -> bool:
    """
    Check ``password`` against a stored value

    Values written before hashing was introduced are plaintext; they are
    compared in constant time and the caller is expected to re-hash them
    (see ``needs_rehash``).
    """
    if not isinstance(stored, str):
        return False
    if not is_password_hash(stored):
        return hmac.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))
    try:
        return check_password_hash(stored, password)
    except ValueError:
        return False


def needs_rehash(stored: str) -> bool:
    return not is_password_hash(stored)


def new_session_token() -> str:
    return secrets.token_urlsafe(32)


def token_digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
