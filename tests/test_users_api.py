from datetime import timedelta

from app.models.user import User
from app.utils.dates import utcnow
from tests.conftest import PASSWORD, bearer

USERS = "/api/users"


def _register(client, **overrides):
    payload = {
        "email": "Nova@Example.com",
        "username": "Nova",
        "password": "Passw0rd!",
        "first_name": "Nova",
        "last_name": "Reyes",
        "agree_to_terms": True,
    }
    payload.update(overrides)
    return client.post(f"{USERS}/register", json=payload)


def _login(client, email, password=PASSWORD):
    return client.post(f"{USERS}/login", json={"email": email, "password": password})


# ============ Registration ============

def test_register_returns_token_and_lowercases(client, db):
    response = _register(client)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["access_token"]
    assert data["user"]["email"] == "nova@example.com"
    assert data["user"]["username"] == "nova"
    assert data["user"]["initials"] == "NR"
    assert "password" not in data["user"]

    user = db.query(User).filter(User.email == "nova@example.com").first()
    assert user.email_verified is False
    assert user.verification_token


def test_register_requires_terms(client):
    response = _register(client, agree_to_terms=False)

    assert response.status_code == 400
    assert response.json()["error"] == "You must agree to the terms of service"


def test_register_rejects_duplicates(client):
    _register(client)

    assert _register(client, username="other").json()["error"] == "Email already registered"
    assert _register(client, email="other@example.com").json()["error"] == "Username already taken"


def test_register_rejects_short_password(client):
    assert _register(client, password="short").status_code == 400


# ============ Login ============

def test_login_requires_verified_email(client, make_user):
    user = make_user(verified=False)

    response = _login(client, user.email)

    assert response.status_code == 403


def test_login_success_resets_attempts(client, db, make_user):
    user = make_user(login_attempts=3)

    response = _login(client, user.email)

    assert response.status_code == 200
    assert response.json()["data"]["token_type"] == "bearer"
    db.refresh(user)
    assert user.login_attempts == 0
    assert user.last_login_at is not None


def test_wrong_password_locks_after_five_attempts(client, db, make_user):
    user = make_user()

    for _ in range(5):
        assert _login(client, user.email, "wrong-password").status_code == 400

    locked = _login(client, user.email)
    assert locked.status_code == 403
    assert "locked" in locked.json()["error"]


def test_expired_lock_resets_counter(client, db, make_user):
    user = make_user(login_attempts=5, lock_until=utcnow() - timedelta(minutes=1))

    assert _login(client, user.email, "wrong-password").status_code == 400

    db.refresh(user)
    assert user.login_attempts == 0
    assert user.lock_until is None


def test_login_unknown_email(client):
    assert _login(client, "ghost@example.com").status_code == 400


# ============ Verification and passwords ============

def test_verify_email_allows_login(client, db):
    _register(client)
    user = db.query(User).filter(User.email == "nova@example.com").first()

    response = client.post(f"{USERS}/verify-email/{user.verification_token}")

    assert response.status_code == 200
    assert _login(client, "nova@example.com", "Passw0rd!").status_code == 200


def test_verify_email_with_bad_token(client):
    assert client.post(f"{USERS}/verify-email/bogus").status_code == 400


def test_forgot_password_does_not_reveal_accounts(client, make_user):
    user = make_user()

    known = client.post(f"{USERS}/forgot-password", json={"email": user.email}).json()
    unknown = client.post(f"{USERS}/forgot-password", json={"email": "nobody@example.com"}).json()

    assert known == unknown


def test_reset_password_flow(client, db, make_user):
    user = make_user()
    client.post(f"{USERS}/forgot-password", json={"email": user.email})
    db.refresh(user)
    token = user.password_reset_token

    mismatch = client.post(f"{USERS}/reset-password/{token}", json={"password": "NewPassw0rd", "confirm_password": "other"})
    ok = client.post(f"{USERS}/reset-password/{token}", json={"password": "NewPassw0rd", "confirm_password": "NewPassw0rd"})

    assert mismatch.status_code == 400
    assert ok.status_code == 200
    assert _login(client, user.email, "NewPassw0rd").status_code == 200


# ============ Profile ============

def test_profile_requires_token(client):
    response = client.get(f"{USERS}/profile")

    assert response.status_code == 401
    assert response.json() == {"ok": False, "error": "Not authenticated"}


def test_profile_rejects_garbage_token(client):
    response = client.get(f"{USERS}/profile", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_suspended_user_is_forbidden(client, make_user):
    user = make_user(status="suspended")

    assert client.get(f"{USERS}/profile", headers=bearer(user)).status_code == 403


def test_get_and_update_profile(client, make_user):
    user = make_user()
    headers = bearer(user)

    updated = client.put(f"{USERS}/profile", json={"bio": "Inker", "country": "Kenya"}, headers=headers)
    profile = client.get(f"{USERS}/profile", headers=headers).json()["data"]

    assert updated.status_code == 200
    assert profile["bio"] == "Inker"
    assert profile["country"] == "Kenya"


def test_change_password(client, make_user):
    user = make_user()
    headers = bearer(user)
    url = f"{USERS}/change-password"

    wrong = client.post(url, json={"current_password": "nope", "new_password": "Another1!", "confirm_password": "Another1!"}, headers=headers)
    mismatch = client.post(url, json={"current_password": PASSWORD, "new_password": "Another1!", "confirm_password": "x"}, headers=headers)
    ok = client.post(url, json={"current_password": PASSWORD, "new_password": "Another1!", "confirm_password": "Another1!"}, headers=headers)

    assert wrong.status_code == 400
    assert mismatch.status_code == 400
    assert ok.status_code == 200
    assert _login(client, user.email, "Another1!").status_code == 200
