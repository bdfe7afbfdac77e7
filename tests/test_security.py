from datetime import timedelta

import jwt
import pytest
from fastapi import Response

from paw_haven.core.config import Settings, settings
from paw_haven.core.exceptions import UnauthorizedError
from paw_haven.core.security import (
    clear_session_cookie,
    decode_token,
    issue_token,
    set_session_cookie,
)


class TestSessionTokens:

    def test_round_trip_keeps_identity(self):
        token = issue_token({"email": "alice@example.com", "name": "Alice"})

        claims = decode_token(token)

        assert claims["email"] == "alice@example.com"
        assert claims["name"] == "Alice"

    def test_token_is_valid_for_a_year(self):
        claims = decode_token(issue_token({"email": "alice@example.com"}))

        assert claims["exp"] - claims["iat"] >= timedelta(days=365).total_seconds()

    def test_tampered_token_is_rejected(self):
        token = issue_token({"email": "alice@example.com"})
        header, payload, signature = token.split(".")
        forged = jwt.encode({"email": "admin@pawhaven.org"}, "another-secret", algorithm="HS256")

        with pytest.raises(UnauthorizedError):
            decode_token(f"{header}.{forged.split('.')[1]}.{signature}")

    def test_expired_token_is_rejected(self):
        expired = Settings(TOKEN_TTL_DAYS=-1)
        token = issue_token({"email": "alice@example.com"}, config=expired)

        with pytest.raises(UnauthorizedError) as exc:
            decode_token(token)
        assert exc.value.message == "Session expired"

    def test_token_without_email_is_rejected(self):
        token = jwt.encode({"name": "nobody"}, settings.ACCESS_TOKEN_SECRET, algorithm="HS256")

        with pytest.raises(UnauthorizedError):
            decode_token(token)

    def test_garbage_is_rejected(self):
        with pytest.raises(UnauthorizedError):
            decode_token("not-a-token")


class TestSessionCookie:

    def test_development_cookie_is_strict(self):
        response = Response()
        set_session_cookie(response, "abc", config=Settings(ENVIRONMENT="development"))

        cookie = response.headers["set-cookie"].lower()
        assert cookie.startswith("token=abc")
        assert "httponly" in cookie
        assert "samesite=strict" in cookie
        assert "secure" not in cookie

    def test_production_cookie_is_cross_site(self):
        response = Response()
        set_session_cookie(response, "abc", config=Settings(ENVIRONMENT="production"))

        cookie = response.headers["set-cookie"].lower()
        assert "secure" in cookie
        assert "samesite=none" in cookie

    def test_clear_cookie_expires_it(self):
        response = Response()
        clear_session_cookie(response)

        cookie = response.headers["set-cookie"].lower()
        assert cookie.startswith("token=")
        assert "max-age=0" in cookie
