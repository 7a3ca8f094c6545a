"""Token service and the token_required / role_required decorators."""

from datetime import datetime, timezone

import jwt
import pytest

from exmobile.tokens import issue_token, verify_token, InvalidToken

SECRET = "unit-test-secret-key-with-enough-length"


class TestTokenService:

    def test_issue_then_verify_returns_email(self):
        token = issue_token("a@x.com", SECRET)
        assert verify_token(token, SECRET)["email"] == "a@x.com"

    def test_token_expires_after_nine_days(self):
        claims = jwt.decode(issue_token("a@x.com", SECRET), SECRET, algorithms=["HS256"])
        remaining = claims["exp"] - datetime.now(timezone.utc).timestamp()
        assert 8.9 * 86400 < remaining <= 9 * 86400

    def test_wrong_secret_is_invalid(self):
        token = issue_token("a@x.com", SECRET)
        with pytest.raises(InvalidToken):
            verify_token(token, "another-secret-key-with-enough-length")

    def test_expired_token_is_invalid(self):
        token = issue_token("a@x.com", SECRET, expires_days=-1)
        with pytest.raises(InvalidToken):
            verify_token(token, SECRET)

    def test_garbage_is_invalid(self):
        with pytest.raises(InvalidToken):
            verify_token("not.a.token", SECRET)


class TestAuthentication:

    def test_missing_header_is_401(self, client):
        for method, path in [("get", "/products"), ("post", "/bookings"),
                             ("get", "/users"), ("delete", "/users/64b7f0000000000000000000")]:
            response = getattr(client, method)(path)
            assert response.status_code == 401, path
            assert response.get_json() == {"message": "unauthorized access"}

    def test_bad_signature_is_403(self, client):
        token = issue_token("a@x.com", "some-other-secret-key-0123456789abcdef")
        response = client.get("/products", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403

    def test_expired_token_is_403(self, client, app):
        token = issue_token("a@x.com", app.config["ACCESS_TOKEN_SECRET"], expires_days=-1)
        response = client.get("/products", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403

    def test_non_bearer_header_is_403(self, client):
        response = client.get("/products", headers={"Authorization": "Token abc"})
        assert response.status_code == 403


class TestRoleChecks:

    def test_seller_route_rejects_buyer(self, client, make_user, auth_header):
        make_user("buyer@x.com", role="buyer")
        response = client.post("/products", json={"name": "Phone"}, headers=auth_header("buyer@x.com"))
        assert response.status_code == 403

    def test_admin_route_rejects_seller(self, client, make_user, auth_header):
        make_user("seller@x.com", role="seller")
        response = client.get("/users", headers=auth_header("seller@x.com"))
        assert response.status_code == 403

    def test_role_check_rejects_unknown_user(self, client, auth_header):
        response = client.get("/users", headers=auth_header("ghost@x.com"))
        assert response.status_code == 403
