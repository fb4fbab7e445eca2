from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # Database
    database_url: Optional[str] = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "smart_inventory"
    db_pool_size: int = 5

    # Replicate (IBM Granite)
    replicate_api_key: Optional[str] = None
    replicate_model: str = (
        "ibm-granite/granite-3.3-8b-instruct:"
        "618ecbe80773609e96ea19d8c96e708f6f2b368bb89be8fad509983194466bf8"
    )
    replicate_base_url: str = "https://api.replicate.com"

    # Generation parameters
    generation_max_new_tokens: int = 300
    generation_min_new_tokens: int = 50
    generation_temperature: float = 0.8
    generation_timeout: float = 60.0
    generation_poll_interval: float = 1.0

    # Mock mode for running without Replicate
    mock_mode: bool = False

    # FastAPI
    project_name: str = "Smart Inventory"
    api_prefix: str = "/api"
    port: int = 3000
    debug: bool = False
    # Comma-separated, e.g. "https://shop.example.com,https://admin.example.com"
    cors_origins: str = "*"

    # Rate Limiting
    rate_limit_requests: int = 100
    rate_limit_period: int = 60

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    # Monitoring & Metrics
    enable_metrics: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    def get_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    def get_cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()
