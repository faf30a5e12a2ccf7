from models.user import User

PASSWORD = "correct-horse-battery"

REGISTER = "/api/v1/auth/register"
LOGIN = "/api/v1/auth/login"
REFRESH = "/api/v1/auth/refresh"
LOGOUT = "/api/v1/auth/logout"
PROFILE = "/api/v1/auth/profile"


def test_health(client):
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "database": "ok", "version": "1.0.0"}


def test_register(client):
    resp = client.post(REGISTER, json={"username": "alice", "email": "Alice@X.com", "password": PASSWORD})
    assert resp.status_code == 201
    body = resp.get_json()
    assert set(body) == {"user", "accessToken", "refreshToken"}
    assert body["user"]["email"] == "alice@x.com"


def test_register_duplicate_is_conflict(client, alice):
    resp = client.post(REGISTER, json={"username": "alice", "email": "new@x.com", "password": PASSWORD})
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "CONFLICT"


def test_register_validation(client):
    resp = client.post(REGISTER, json={"username": "a", "email": "not-an-email", "password": "short"})
    assert resp.status_code == 422
    details = resp.get_json()["details"]
    assert {"username", "email", "password"} <= set(details)


def test_register_rejects_overlong_email(client):
    email = "a" * 64 + "@" + ".".join(["b" * 60] * 4) + ".com"
    assert len(email) > 255
    resp = client.post(REGISTER, json={"username": "longmail", "email": email, "password": PASSWORD})
    assert resp.status_code == 422
    assert "email" in resp.get_json()["details"]


def test_login(client, alice):
    resp = client.post(LOGIN, json={"emailOrUsername": "alice@x.com", "password": PASSWORD})
    assert resp.status_code == 200
    assert resp.get_json()["user"]["id"] == alice["user"]["id"]


def test_login_bad_credentials(client, alice):
    wrong_password = client.post(LOGIN, json={"emailOrUsername": "alice", "password": "nope-nope-nope"})
    unknown_user = client.post(LOGIN, json={"emailOrUsername": "nobody", "password": PASSWORD})
    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.get_json() == unknown_user.get_json()


def test_profile_requires_access_token(client, alice, auth_headers):
    assert client.get(PROFILE).status_code == 401
    # a refresh token is not an access token
    assert client.get(PROFILE, headers=auth_headers(alice["refreshToken"])).status_code == 401

    resp = client.get(PROFILE, headers=auth_headers(alice["accessToken"]))
    assert resp.status_code == 200
    assert resp.get_json()["username"] == "alice"


def test_refresh_requires_token_in_body(client, alice):
    assert client.post(REFRESH).status_code == 401
    assert client.post(REFRESH, json={}).status_code == 401
    assert client.post(REFRESH, json={"refreshToken": alice["accessToken"]}).status_code == 401


def test_unauthorized_responses_are_uniform(client, alice):
    bodies = [
        client.post(REFRESH, json={}).get_json(),
        client.post(REFRESH, json={"refreshToken": "garbage"}).get_json(),
        client.get(PROFILE, headers={"Authorization": "Bearer garbage"}).get_json(),
    ]
    assert all(b == bodies[0] for b in bodies)
    assert bodies[0]["status"] == 401


def test_session_lifecycle(client, register, auth_headers):
    register("alice", "alice@x.com", PASSWORD)

    login = client.post(LOGIN, json={"emailOrUsername": "alice", "password": PASSWORD}).get_json()
    old_refresh = login["refreshToken"]

    rotated = client.post(REFRESH, json={"refreshToken": old_refresh})
    assert rotated.status_code == 200
    new_tokens = rotated.get_json()
    assert set(new_tokens) == {"accessToken", "refreshToken"}

    # old token consumed, new one live
    assert client.post(REFRESH, json={"refreshToken": old_refresh}).status_code == 401
    assert client.get(PROFILE, headers=auth_headers(new_tokens["accessToken"])).status_code == 200

    logout = client.post(
        LOGOUT,
        json={"refreshToken": new_tokens["refreshToken"]},
        headers=auth_headers(new_tokens["accessToken"]),
    )
    assert logout.status_code == 200
    assert logout.get_json() == {"message": "Logged out successfully"}
    assert client.post(REFRESH, json={"refreshToken": new_tokens["refreshToken"]}).status_code == 401


def test_logout_single_session(client, alice, auth_headers):
    phone = client.post(LOGIN, json={"emailOrUsername": "alice", "password": PASSWORD}).get_json()

    resp = client.post(LOGOUT, json={"refreshToken": alice["refreshToken"]}, headers=auth_headers(alice["accessToken"]))
    assert resp.status_code == 200

    assert client.post(REFRESH, json={"refreshToken": alice["refreshToken"]}).status_code == 401
    assert client.post(REFRESH, json={"refreshToken": phone["refreshToken"]}).status_code == 200


def test_logout_everywhere(client, alice, auth_headers):
    phone = client.post(LOGIN, json={"emailOrUsername": "alice", "password": PASSWORD}).get_json()

    resp = client.post(LOGOUT, headers=auth_headers(alice["accessToken"]))
    assert resp.status_code == 200

    for token in (alice["refreshToken"], phone["refreshToken"]):
        assert client.post(REFRESH, json={"refreshToken": token}).status_code == 401


def test_logout_requires_access_token(client, alice):
    assert client.post(LOGOUT, json={"refreshToken": alice["refreshToken"]}).status_code == 401


def test_deactivated_user_is_locked_out(client, app, app_storage, alice, auth_headers):
    with app.app_context():
        user = app_storage.get(User, alice["user"]["id"])
        user.is_active = False
        app_storage.save()

    assert client.get(PROFILE, headers=auth_headers(alice["accessToken"])).status_code == 401
    assert client.post(REFRESH, json={"refreshToken": alice["refreshToken"]}).status_code == 401
    assert client.post(LOGIN, json={"emailOrUsername": "alice", "password": PASSWORD}).status_code == 401
