import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from app.config import Settings
from app.core.generation import DescriptionGenerator
from app.core.rate_limiter import limiter
from app.db.database import QueryGateway
from app.main import create_app


class FakeGenerator(DescriptionGenerator):
    """Records calls and returns a canned description or raises a canned error"""

    def __init__(self, result: str = "A generated description."):
        self.result = result
        self.error = None
        self.calls = []

    def generate(self, name: str, attributes: str) -> str:
        self.calls.append((name, attributes))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield


@pytest.fixture
def test_settings():
    return Settings(_env_file=None, log_format="console", mock_mode=True)


@pytest.fixture
def gateway(tmp_path):
    # File-backed so every pooled connection sees the same data
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}")
    gateway = QueryGateway(engine)
    gateway.create_tables()
    yield gateway
    engine.dispose()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def client(test_settings, gateway, generator):
    app = create_app(settings=test_settings, gateway=gateway, generator=generator)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def create_product(client):
    def _create(name="Stussy 8-Ball Tee", attributes="Cotton, Black, Size L"):
        response = client.post("/api/products/", json={"name": name, "attributes": attributes})
        assert response.status_code == 201
        return response.json()

    return _create
