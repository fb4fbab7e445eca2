from app.config import Settings


def test_cors_origins_accepts_comma_separated_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://shop.example.com, https://admin.example.com")

    settings = Settings(_env_file=None)

    assert settings.get_cors_origins() == ["https://shop.example.com", "https://admin.example.com"]


def test_cors_origins_default_allows_all():
    assert Settings(_env_file=None).get_cors_origins() == ["*"]


def test_database_url_built_from_parts():
    settings = Settings(_env_file=None, database_url=None, db_user="inv", db_password="pw", db_host="db", db_port=5433, db_name="shop")

    assert settings.get_database_url() == "postgresql://inv:pw@db:5433/shop"
