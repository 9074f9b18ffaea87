"""
测试配置文件
提供测试所需的fixtures和配置
"""

import pytest
from fastapi.testclient import TestClient

from restaurant_api.app import create_app
from restaurant_api.config.settings import Settings
from restaurant_api.core.database import DatabaseManager
from restaurant_api.core.document_store import DocumentStore
from restaurant_api.core.exceptions import AuthenticationError
from restaurant_api.core.security import AuthenticatedIdentity, IdentityProvider
from restaurant_api.services.user_service import UserService

TEST_JWT_SECRET = "test-secret-key-0123456789abcdef0123456789"
TEST_LIVEKIT_SECRET = "livekit-test-secret-0123456789abcdef0123"

CUSTOMER_TOKEN = "customer-id-token"
NON_CUSTOMER_TOKEN = "guest-id-token"


class StubIdentityProvider(IdentityProvider):
    """替代 Firebase 的测试身份源"""

    name = "firebase"

    def __init__(self):
        self.identities = {
            CUSTOMER_TOKEN: AuthenticatedIdentity(
                id="firebase-uid-1",
                email="jane.doe@example.com",
                role="customer",
                provider=self.name,
            ),
            NON_CUSTOMER_TOKEN: AuthenticatedIdentity(
                id="firebase-uid-2",
                email="guest@example.com",
                role="guest",
                provider=self.name,
            ),
        }

    def verify(self, token: str) -> AuthenticatedIdentity:
        identity = self.identities.get(token)
        if identity is None:
            raise AuthenticationError("Unauthorized: Invalid or expired token")
        return identity


@pytest.fixture
def test_settings():
    """测试配置"""
    return Settings(
        _env_file=None,
        database_url="duckdb://:memory:",
        jwt_secret_key=TEST_JWT_SECRET,
        firebase_project_id="demo-restaurant",
        livekit_api_key="test-livekit-key",
        livekit_api_secret=TEST_LIVEKIT_SECRET,
        admin_email=None,
        admin_password=None,
        environment="test",
        log_level="WARNING",
    )


@pytest.fixture
def test_db():
    """测试数据库（内存）"""
    return DatabaseManager(":memory:")


@pytest.fixture
def store():
    """已初始化的文档存储，供服务层单元测试使用"""
    db = DatabaseManager(":memory:")
    db.init_database()
    yield DocumentStore(db)
    db.close()


@pytest.fixture
def app_instance(test_settings, test_db):
    """测试应用"""
    app = create_app(settings=test_settings, db=test_db)
    app.state.external_identity_provider = StubIdentityProvider()
    return app


@pytest.fixture
def client(app_instance):
    """测试客户端，进入上下文时执行 lifespan 初始化数据库"""
    with TestClient(app_instance) as c:
        yield c


@pytest.fixture
def admin_user(client, test_db):
    """管理员用户"""
    user = UserService(test_db).create({
        "email": "admin@example.com",
        "password": "admin123",
        "full_name": "Admin User",
        "role": "admin",
    })
    return {"id": user.id, "email": user.email, "password": "admin123", "role": "admin"}


@pytest.fixture
def staff_user(client, test_db):
    """普通员工"""
    user = UserService(test_db).create({
        "email": "staff@example.com",
        "password": "staff123",
        "full_name": "Staff User",
        "phone": "555-0100",
        "role": "staff",
    })
    return {"id": user.id, "email": user.email, "password": "staff123", "role": "staff"}


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def login_headers(client, user) -> dict:
    """通过登录接口获取会话令牌"""
    response = client.post(
        "/api/auth/login",
        json={"email": user["email"], "password": user["password"]},
    )
    assert response.status_code == 200
    return bearer(response.json()["data"]["token"])


@pytest.fixture
def admin_headers(client, admin_user):
    return login_headers(client, admin_user)


@pytest.fixture
def staff_headers(client, staff_user):
    return login_headers(client, staff_user)


@pytest.fixture
def customer_headers():
    return bearer(CUSTOMER_TOKEN)


@pytest.fixture
def sample_takeaway():
    """示例外带订单请求体"""
    return {
        "customer_name": "Jane Doe",
        "customer_phone": "555-0101",
        "customer_email": "Jane.Doe@Example.com",
        "pickup_time": "2024-06-01T18:30",
        "items": [
            {"name": "Pizza", "quantity": 2, "price": 8.5},
            {"name": "Soda", "quantity": 1, "price": 1.5},
        ],
        "special_instructions": "Extra napkins",
    }


@pytest.fixture
def sample_delivery():
    """示例外卖订单请求体"""
    return {
        "customer_name": "John Smith",
        "customer_phone": "555-0102",
        "customer_email": "john@example.com",
        "delivery_address": "12 Harbour Road",
        "delivery_time": "2024-06-01T19:00",
        "items": [
            {"name": "Burger", "quantity": 2, "price": 10},
            {"name": "Fries", "quantity": 1, "price": 3.25},
        ],
    }


@pytest.fixture
def sample_reservation():
    """示例预订请求体"""
    return {
        "customer_name": "Alice Wong",
        "customer_phone": "555-0103",
        "customer_email": "alice@example.com",
        "reservation_time": "2024-06-02T19:30",
        "party_size": 4,
        "composition": {"adults": 2, "kids": 2},
        "preferences": {"table_area": "window", "seating_type": "booth"},
        "kids_seats": 1,
        "occasion": {"type": "birthday", "details": "Cake at dessert"},
    }


@pytest.fixture
def sample_menu_item():
    """示例菜品请求体"""
    return {
        "name": "Margherita Pizza",
        "description": "Tomato, mozzarella and basil",
        "price": 12.5,
        "category": "Main",
        "tags": ["vegetarian", "classic", "vegetarian"],
    }
