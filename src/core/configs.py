from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Zoo Operations"
    description: str = "Zoo Operations Management API"
    version: str = "1.0.0"
    docs_url: str = "/docs"
    redoc_url: str = "/redoc"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Base URL used by the API client
    api_url: str = Field(
        default="http://localhost:5003", validation_alias="NEXT_PUBLIC_API_URL"
    )
    request_timeout: float = 30.0

    database_url: str = "sqlite:///./zoo.db"
    storage_backend: str = "sql"  # sql | memory
    seed_demo_data: bool = False

    jwt_secret_key: str = "dev-jwt-secret-change-me"
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 24

    log_level: str = "INFO"

    checkup_staleness_days: int = 30

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "allow"
        populate_by_name = True


settings = Settings()
