"""
EdAiVi Studio Backend: Credentials and Tokens
=============================================

What:  Password hashing, session-token signing, and one-time email tokens.
How:   passlib `CryptContext` (pbkdf2_sha256) for passwords; PyJWT HS256 for
       session tokens; `secrets` + SHA-256 for verification/reset tokens.
Who:   Used by AuthService (issue) and the `get_current_user` dependency (verify).

Token Claims:
    sub  → user id (string)
    iat  → issued-at, epoch seconds
    exp  → expiry, epoch seconds
    Developer tokens additionally carry `is_developer: true` and `role: admin`.

One-time tokens:
    The raw value goes to the user (normally by email); only its SHA-256
    hex digest is stored, so a leaked user record cannot be replayed.
"""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import jwt
from passlib.context import CryptContext
from passlib.exc import UnknownHashError

from studio.config import settings

_pwd = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
_JWT_ALG = "HS256"


# ── Passwords ─────────────────────────────────────────────────────────────
def hash_password(password: str) -> str:
    if not password:
        raise ValueError("password_blank")
    return _pwd.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return _pwd.verify(password, password_hash)
    except (UnknownHashError, ValueError):
        return False


# ── Session Tokens ────────────────────────────────────────────────────────
def create_access_token(
    *,
    user_id: str,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None,
    secret: Optional[str] = None,
) -> str:
    secret = secret or settings.jwt_secret
    if not secret:
        raise ValueError("jwt_secret_blank")

    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(days=settings.jwt_expires_days))

    payload: Dict[str, Any] = {
        **(extra_claims or {}),
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=_JWT_ALG)


def decode_access_token(token: str, secret: Optional[str] = None) -> Dict[str, Any]:
    """
    Decode and verify a session token.

    Raises:
        jwt.ExpiredSignatureError: token is past its `exp`
        jwt.InvalidTokenError:     bad signature, malformed token, missing claims
    """
    if not token:
        raise jwt.InvalidTokenError("token_blank")
    return jwt.decode(
        token,
        secret or settings.jwt_secret,
        algorithms=[_JWT_ALG],
        options={"require": ["sub", "exp"]},
    )


# ── One-Time Tokens ───────────────────────────────────────────────────────
def hash_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def new_one_time_token(lifetime: timedelta) -> Tuple[str, str, datetime]:
    """Returns (raw token, stored hash, expiry)."""
    raw = secrets.token_hex(20)
    return raw, hash_token(raw), datetime.now(timezone.utc) + lifetime
