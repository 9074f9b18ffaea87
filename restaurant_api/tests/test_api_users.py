"""
用户管理API集成测试
"""


class TestUsersAPI:
    """用户管理API测试（仅管理员）"""

    def test_requires_admin(self, client, staff_headers):
        response = client.get("/api/users", headers=staff_headers)
        assert response.status_code == 403
        assert response.json()["message"] == "Forbidden: Insufficient permissions"

    def test_requires_token(self, client):
        assert client.get("/api/users").status_code == 401

    def test_list(self, client, admin_headers, staff_user):
        body = client.get("/api/users", headers=admin_headers).json()
        assert body["count"] == 2
        emails = {u["email"] for u in body["data"]}
        assert emails == {"admin@example.com", "staff@example.com"}

    def test_list_filters(self, client, admin_headers, staff_user):
        staff = client.get("/api/users", params={"role": "staff"}, headers=admin_headers).json()
        assert [u["email"] for u in staff["data"]] == ["staff@example.com"]
        everyone = client.get("/api/users", params={"role": "all"}, headers=admin_headers).json()
        assert everyone["count"] == 2
        found = client.get("/api/users", params={"search": "0100"}, headers=admin_headers).json()
        assert [u["email"] for u in found["data"]] == ["staff@example.com"]

    def test_create(self, client, admin_headers):
        response = client.post(
            "/api/users",
            json={"email": "New@Example.com", "password": "secret1", "full_name": "New Person", "role": "manager"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["email"] == "new@example.com"
        assert data["role"] == "manager"
        assert "password" not in data
        assert "password_hash" not in data

    def test_create_missing_fields(self, client, admin_headers):
        response = client.post("/api/users", json={"email": "x@example.com"}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Email, password, full name, and role are required"

    def test_create_duplicate_email(self, client, admin_headers, staff_user):
        response = client.post(
            "/api/users",
            json={"email": "staff@example.com", "password": "secret1", "full_name": "Dup", "role": "staff"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["message"] == "User with this email already exists"

    def test_create_unknown_role(self, client, admin_headers):
        response = client.post(
            "/api/users",
            json={"email": "r@example.com", "password": "secret1", "full_name": "R", "role": "owner"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid role specified"

    def test_update(self, client, admin_headers, staff_user):
        response = client.put(
            f"/api/users/{staff_user['id']}",
            json={"role": "manager", "is_active": False},
            headers=admin_headers,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["role"] == "manager"
        assert data["is_active"] is False

    def test_update_empty(self, client, admin_headers, staff_user):
        response = client.put(f"/api/users/{staff_user['id']}", json={}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "No data provided for update"

    def test_update_missing_user(self, client, admin_headers):
        response = client.put("/api/users/9999", json={"full_name": "X"}, headers=admin_headers)
        assert response.status_code == 404

    def test_get(self, client, admin_headers, staff_user):
        data = client.get(f"/api/users/{staff_user['id']}", headers=admin_headers).json()["data"]
        assert data["full_name"] == "Staff User"

    def test_delete(self, client, admin_headers, staff_user):
        response = client.delete(f"/api/users/{staff_user['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert client.get(f"/api/users/{staff_user['id']}", headers=admin_headers).status_code == 404

    def test_cannot_delete_self(self, client, admin_headers, admin_user):
        response = client.delete(f"/api/users/{admin_user['id']}", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot delete your own account"

    def test_stats(self, client, admin_headers, staff_user):
        data = client.get("/api/users/stats", headers=admin_headers).json()["data"]
        assert data == {"total": 2, "active": 2, "inactive": 0, "byRole": {"admin": 1, "staff": 1}}

    def test_roles(self, client, admin_headers):
        data = client.get("/api/roles", headers=admin_headers).json()["data"]
        assert [r["name"] for r in data] == ["admin", "manager", "staff"]
