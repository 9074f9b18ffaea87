"""
应用级测试：健康检查、统一错误格式
"""

from fastapi.testclient import TestClient

from restaurant_api.app import create_app
from restaurant_api.core.database import DatabaseManager
from restaurant_api.services.user_service import UserService


class TestApplication:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_unknown_route(self, client):
        response = client.get("/api/unknown")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Route not found"}

    def test_malformed_json(self, client):
        response = client.post(
            "/api/takeaway",
            content="not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Validation error"

    def test_database_closed_after_shutdown(self, app_instance, test_db):
        with TestClient(app_instance):
            assert test_db.is_open
        assert not test_db.is_open

    def test_bootstrap_admin(self, test_settings):
        settings = test_settings.model_copy(
            update={"admin_email": "Boot@Example.com", "admin_password": "bootpass"}
        )
        db = DatabaseManager(":memory:")
        with TestClient(create_app(settings=settings, db=db)) as c:
            users = UserService(db).list(role="admin")
            assert [u.email for u in users] == ["boot@example.com"]
            response = c.post("/api/auth/login", json={"email": "boot@example.com", "password": "bootpass"})
            assert response.status_code == 200


class TestUnexpectedErrors:

    def test_internal_error_envelope(self, app_instance):
        @app_instance.get("/boom")
        def boom():
            raise RuntimeError("kaboom")

        with TestClient(app_instance, raise_server_exceptions=False) as c:
            response = c.get("/boom")
        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Internal server error"
        assert body["error"] == "kaboom"
        assert "RuntimeError" in body["stack"]

    def test_no_stack_in_production(self, test_settings, test_db):
        settings = test_settings.model_copy(update={"environment": "production"})
        app = create_app(settings=settings, db=test_db)

        @app.get("/boom")
        def boom():
            raise RuntimeError("kaboom")

        with TestClient(app, raise_server_exceptions=False) as c:
            body = c.get("/boom").json()
        assert body["message"] == "Internal server error"
        assert "stack" not in body

    def test_stack_setting_is_per_app(self, test_settings):
        production = create_app(
            settings=test_settings.model_copy(update={"environment": "production"}),
            db=DatabaseManager(":memory:"),
        )
        development = create_app(settings=test_settings, db=DatabaseManager(":memory:"))

        for app in (production, development):
            @app.get("/boom")
            def boom():
                raise RuntimeError("kaboom")

        with TestClient(production, raise_server_exceptions=False) as c:
            assert "stack" not in c.get("/boom").json()
        with TestClient(development, raise_server_exceptions=False) as c:
            assert "RuntimeError" in c.get("/boom").json()["stack"]
