from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from blog_api.core.auth import extract_bearer_token
from blog_api.core.config import Settings
from blog_api.core.errors import InvalidToken, MissingToken
from blog_api.core.security import create_access_token, verify_token


def test_issue_then_verify_returns_identity():
    """Test : un token émis redonne {userId, email}"""
    token = create_access_token(42, "writer@example.com")
    identity = verify_token(token)
    assert identity.user_id == 42
    assert identity.email == "writer@example.com"


def test_token_expires_after_24_hours():
    token = create_access_token(1, "a@example.com")
    claims = jwt.get_unverified_claims(token)
    expires = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
    delta = expires - datetime.now(timezone.utc)
    assert timedelta(hours=23, minutes=59) < delta <= timedelta(hours=24)


def test_altered_signature_is_invalid():
    token = create_access_token(1, "a@example.com")
    header, payload, signature = token.split(".")
    altered = signature[:5] + ("A" if signature[5] != "A" else "B") + signature[6:]
    with pytest.raises(InvalidToken):
        verify_token(f"{header}.{payload}.{altered}")


def test_expired_token_is_invalid():
    config = Settings()
    config.JWT_EXPIRE_MIN = -1
    token = create_access_token(1, "a@example.com", config)
    with pytest.raises(InvalidToken):
        verify_token(token, config)


def test_token_signed_with_other_secret_is_invalid():
    other = Settings()
    other.JWT_SECRET = "another-secret"
    token = create_access_token(1, "a@example.com", other)
    with pytest.raises(InvalidToken):
        verify_token(token)


def test_token_without_identity_claims_is_invalid():
    config = Settings()
    token = jwt.encode({"sub": "1"}, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)
    with pytest.raises(InvalidToken):
        verify_token(token, config)


@pytest.mark.parametrize("token", [None, ""])
def test_missing_token(token):
    with pytest.raises(MissingToken):
        verify_token(token)


def test_extract_bearer_token():
    assert extract_bearer_token("Bearer abc.def") == "abc.def"
    assert extract_bearer_token("bearer abc") == "abc"
    assert extract_bearer_token(None) is None
    assert extract_bearer_token("   ") is None
    assert extract_bearer_token("Bearer ") is None
    with pytest.raises(InvalidToken):
        extract_bearer_token("Basic dXNlcjpwYXNz")


# ========== GATE HTTP ==========
def test_gate_without_token_returns_401(client):
    response = client.get("/myblogs")
    assert response.status_code == 401
    assert response.json() == {"error": "Missing token"}


def test_gate_with_invalid_token_returns_403(client):
    response = client.get("/myblogs", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 403
    assert response.json() == {"error": "Invalid token"}


def test_gate_rejects_before_handler_runs(client, db):
    from blog_api.models.post import Post

    response = client.post("/blogs", data={"title": "A", "content": "[]", "publish": "true"})
    assert response.status_code == 401
    assert db.query(Post).count() == 0
