import jwt

from modelchat.services.security import verify_password


def test_register_returns_201_without_sensitive_data(client, repo):
    resp = client.post("/api/register", json={"username": "alice", "password": "pw123"})

    assert resp.status_code == 201
    assert resp.json() == {"message": "User created successfully"}
    user = repo.find_user_by_username("alice")
    assert user.password != "pw123"
    assert verify_password("pw123", user.password)


def test_register_twice_fails_with_duplicate_username(client):
    assert client.post("/api/register", json={"username": "alice", "password": "pw123"}).status_code == 201

    resp = client.post("/api/register", json={"username": "alice", "password": "other"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Username already exists"}


def test_login_returns_token_for_registered_user(client, repo, settings):
    client.post("/api/register", json={"username": "alice", "password": "pw123"})

    resp = client.post("/api/login", json={"username": "alice", "password": "pw123"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["username"] == "alice"
    claims = jwt.decode(body["token"], settings.secret_key, algorithms=[settings.jwt_algorithm])
    assert claims["sub"] == repo.find_user_by_username("alice").id
    assert claims["exp"] - claims["iat"] == 24 * 60 * 60


def test_login_unknown_user_is_rejected(client):
    resp = client.post("/api/login", json={"username": "nobody", "password": "pw123"})

    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid credentials"}


def test_login_wrong_password_is_rejected(client):
    client.post("/api/register", json={"username": "alice", "password": "pw123"})

    resp = client.post("/api/login", json={"username": "alice", "password": "wrong"})

    assert resp.status_code == 401


def test_register_requires_both_fields(client):
    assert client.post("/api/register", json={"username": "alice"}).status_code == 422


def test_password_longer_than_72_bytes_registers_and_logs_in(client):
    password = "x" * 100

    assert client.post("/api/register", json={"username": "alice", "password": password}).status_code == 201

    assert client.post("/api/login", json={"username": "alice", "password": password}).status_code == 200
    # bytes past 72 still matter
    resp = client.post("/api/login", json={"username": "alice", "password": "x" * 99 + "y"})
    assert resp.status_code == 401
