"""
Authentication module for staff login.

Provides email/password authentication against the user directory and
issues opaque session tokens. The return endpoint only runs for requests
that carry a live token.
"""

import logging
import secrets
import hashlib
from datetime import datetime, timezone, timedelta
from typing import Optional, Dict, Any, Mapping

from pydantic import BaseModel

from config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# MODELS
# =============================================================================

class LoginRequest(BaseModel):
    """Login request model."""
    email: str
    password: str


class LoginResponse(BaseModel):
    """Login response model."""
    success: bool
    message: str
    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None


# =============================================================================
# PASSWORD UTILITIES
# =============================================================================

def hash_password(password: str, salt: Optional[str] = None) -> str:
    """
    Hash a password using salted SHA-256.

    The result is "<salt>$<hexdigest>" so the salt travels with the hash.
    """
    salt = salt if salt is not None else secrets.token_hex(8)
    digest = hashlib.sha256((salt + password).encode()).hexdigest()
    return f"{salt}${digest}"


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    if not password_hash or "$" not in password_hash:
        return False
    salt, _ = password_hash.split("$", 1)
    return secrets.compare_digest(hash_password(password, salt), password_hash)


def generate_session_token() -> str:
    """Generate a secure session token."""
    return secrets.token_urlsafe(32)


# =============================================================================
# SESSION STORE (In-Memory)
# =============================================================================

# Sessions do not survive a restart; users log in again.
_sessions: Dict[str, Dict[str, Any]] = {}


def create_session(user_data: Dict[str, Any]) -> str:
    """Create a new session for a user and return the token."""
    token = generate_session_token()
    now = datetime.now(timezone.utc)

    _sessions[token] = {
        "user_id": user_data["id"],
        "email": user_data["email"],
        "name": user_data.get("name", ""),
        "is_admin": bool(user_data.get("isAdmin", False)),
        "created_at": now.isoformat(),
        "expires_at": (now + timedelta(hours=settings.session_ttl_hours)).isoformat(),
    }

    logger.info(f"Created session for user {user_data['id']}")
    return token


def get_session(token: Optional[str]) -> Optional[Dict[str, Any]]:
    """Get session data for a token, or None if invalid/expired."""
    if not token or token not in _sessions:
        return None

    session = _sessions[token]

    # Check expiration
    expires_at = datetime.fromisoformat(session["expires_at"])
    if datetime.now(timezone.utc) > expires_at:
        del _sessions[token]
        return None

    return session


def delete_session(token: Optional[str]) -> bool:
    """Delete a session (logout)."""
    if token and token in _sessions:
        del _sessions[token]
        return True
    return False


def clear_sessions() -> None:
    _sessions.clear()


# =============================================================================
# REQUEST CREDENTIALS
# =============================================================================

def extract_token(headers: Mapping[str, str], cookies: Mapping[str, str]) -> Optional[str]:
    """
    Find the session token on a request.

    Checked in order: X-Auth-Token header, Authorization: Bearer header,
    auth_token cookie.
    """
    token = headers.get("X-Auth-Token")
    if token:
        return token

    auth_header = headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[len("Bearer "):]

    return cookies.get("auth_token") or None


def get_principal(token: Optional[str]) -> Optional[Dict[str, Any]]:
    """The authenticated principal for a token, or None."""
    session = get_session(token)
    if session:
        logger.debug(f"Authenticated request from user: {session['user_id']} ({session['email']})")
    return session
