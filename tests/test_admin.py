from tests.conftest import ADMIN_PASSWORD


def test_login_status_logout(client):
    r = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    token = body["token"]
    headers = {"x-admin-token": token}

    assert client.get("/api/admin/status", headers=headers).json() == {"isAdmin": True}

    r = client.post("/api/admin/logout", headers=headers)
    assert r.status_code == 200
    assert r.json()["success"] is True

    assert client.get("/api/admin/status", headers=headers).json() == {"isAdmin": False}


def test_wrong_password(client):
    r = client.post("/api/admin/login", json={"password": "guess"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid password"}


def test_missing_password(client):
    r = client.post("/api/admin/login", json={})
    assert r.status_code == 401


def test_malformed_login_body(client):
    r = client.post("/api/admin/login", content=b"not json", headers={"content-type": "application/json"})
    assert r.status_code == 400
    assert "error" in r.json()


def test_status_without_or_with_unknown_token(client):
    assert client.get("/api/admin/status").json() == {"isAdmin": False}
    assert client.get("/api/admin/status", headers={"x-admin-token": "made-up"}).json() == {"isAdmin": False}


def test_logout_unknown_token_is_ok(client):
    assert client.post("/api/admin/logout", headers={"x-admin-token": "made-up"}).status_code == 200
    assert client.post("/api/admin/logout").status_code == 200


def test_each_login_gets_its_own_token(client):
    t1 = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD}).json()["token"]
    t2 = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD}).json()["token"]
    assert t1 != t2

    client.post("/api/admin/logout", headers={"x-admin-token": t1})
    assert client.get("/api/admin/status", headers={"x-admin-token": t2}).json() == {"isAdmin": True}


def test_token_in_query_string_is_ignored(client, admin_headers):
    token = admin_headers["x-admin-token"]
    assert client.get("/api/admin/status", params={"token": token}).json() == {"isAdmin": False}
