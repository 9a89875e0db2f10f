"""Tests for the users HTTP endpoints."""

from notesapp.core.modules.user.store import StoreError
from notesapp.errors import HashingError, TokenIssuanceError

REGISTER_URL = "/api/v1/users/"
LOGIN_URL = "/api/v1/users/login"
ME_URL = "/api/v1/users/me"

KSDFG = {"name": "Kshitish Deshpande", "email": "me@ksdfg.dev", "password": "securepassword"}


def register(client, payload=KSDFG):
    return client.post(REGISTER_URL, json=payload)


class TestRegister:
    """Tests for POST /api/v1/users/."""

    def test_successful(self, client):
        """Test that a new user is created and returned without credentials."""
        response = register(client)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User created successfully"
        assert body["user"]["id"] == 1
        assert body["user"]["name"] == "Kshitish Deshpande"
        assert body["user"]["email"] == "me@ksdfg.dev"
        assert "createdAt" in body["user"]
        assert "updatedAt" in body["user"]
        assert not body["user"].get("password")
        assert "password_hash" not in body["user"]

    def test_duplicate_email(self, client):
        """Test that registering the same email twice is a conflict."""
        register(client)
        response = register(client, {**KSDFG, "name": "Someone Else"})

        assert response.status_code == 409
        assert response.json() == {"success": False, "message": "User already exists"}

    def test_malformed_body(self, client):
        """Test that a body missing fields is rejected with 400."""
        response = client.post(REGISTER_URL, json={"email": "me@ksdfg.dev"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "password" in body["message"]

    def test_non_json_body(self, client):
        response = client.post(REGISTER_URL, content=b"not json", headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_store_failure_is_500_with_message(self, client, user_store, monkeypatch):
        """Test that unclassified store errors pass their text through."""

        async def fail(user, session=None):
            raise StoreError("connection reset")

        monkeypatch.setattr(user_store, "create", fail)
        response = register(client)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "connection reset"}

    def test_hashing_failure_is_500(self, client, hasher, monkeypatch):
        """Test that a hashing failure reports its message and stores nothing."""

        def fail(password):
            raise HashingError

        monkeypatch.setattr(hasher, "hash", fail)
        response = register(client)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Failed to hash password"}
        monkeypatch.undo()
        assert register(client).status_code == 201

    def test_password_over_bcrypt_limit_is_500(self, client):
        response = register(client, {**KSDFG, "password": "a" * 73})

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Failed to hash password"}


class TestLogin:
    """Tests for POST /api/v1/users/login."""

    def test_unknown_user(self, client):
        response = client.post(LOGIN_URL, json={"email": "nosuchuser@ksdfg.dev", "password": "x"})

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "User not found"}
        assert "set-cookie" not in response.headers

    def test_incorrect_password(self, client):
        register(client)
        response = client.post(LOGIN_URL, json={"email": "me@ksdfg.dev", "password": "wrongpassword"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Incorrect password"}
        assert "set-cookie" not in response.headers

    def test_successful(self, client, token_service):
        """Test that a login sets an http-only, secure session cookie."""
        register(client)
        response = client.post(LOGIN_URL, json={"email": "me@ksdfg.dev", "password": "securepassword"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "User logged in successfully"}
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("authorization=")
        assert "httponly" in set_cookie.lower()
        assert "secure" in set_cookie.lower()
        assert "expires=" in set_cookie.lower()
        assert token_service.validate(response.cookies["authorization"]).user_id == 1

    def test_malformed_body(self, client):
        response = client.post(LOGIN_URL, json={"email": "me@ksdfg.dev"})
        assert response.status_code == 400

    def test_signing_failure_is_500_without_cookie(self, client, token_service, monkeypatch):
        """Test that a token signing failure reports its message and sets no session."""
        register(client)

        def fail(user_id):
            raise TokenIssuanceError

        monkeypatch.setattr(token_service, "issue", fail)
        response = client.post(LOGIN_URL, json={"email": "me@ksdfg.dev", "password": "securepassword"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Failed to sign token"}
        assert "set-cookie" not in response.headers
        assert "authorization" not in client.cookies


class TestCurrentUser:
    """Tests for GET /api/v1/users/me behind the session cookie."""

    def test_with_session_cookie(self, client):
        register(client)
        client.post(LOGIN_URL, json={"email": "me@ksdfg.dev", "password": "securepassword"})

        response = client.get(ME_URL)

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "me@ksdfg.dev"

    def test_without_cookie(self, client):
        response = client.get(ME_URL)
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_with_invalid_cookie(self, client):
        client.cookies.set("authorization", "garbage")
        response = client.get(ME_URL)
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid or expired session token"}

    def test_handler_not_reached_without_session(self, client, app, monkeypatch):
        """Test that the guard rejects the request before the handler runs."""
        calls = []

        async def tracked(user_id):
            calls.append(user_id)

        monkeypatch.setattr(app, "get_current_user", tracked)
        client.get(ME_URL)
        assert calls == []


class TestBoundary:
    """Tests for routes and middleware outside the users API."""

    def test_hello_world(self, client):
        assert client.get("/").text == "Hello, World!"
        assert client.get("/api/v1/").text == "Hello, World!"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_request_id_generated(self, client):
        assert client.get("/health").headers["X-Request-ID"]

    def test_request_id_propagated(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    def test_unexpected_error_becomes_500(self, client, app, monkeypatch):
        """Test that an unhandled failure is isolated into a 500 response."""

        async def explode(name, email, password):
            raise RuntimeError("boom")

        monkeypatch.setattr(app, "register", explode)
        response = register(client)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "boom"}
