from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Explicit keyword arguments (tests build settings this way)
    2. Environment variables
    3. .env file
    4. configs/config.json (where the admin token usually lives)
    5. Default values below

    Settings are frozen: the signing secret and admin token are read once at
    startup and passed into the services that need them.
    """

    # Environment
    environment: str = "development"
    debug: bool = False

    # Application
    app_name: str = "URL Shortener"
    app_version: str = "1.0.0"

    # Server
    host: str = "127.0.0.1"
    http_port: int = 8080

    # Key-value store
    store_backend: str = "sqlalchemy"  # Options: "sqlalchemy", "memory"
    database_url: str = "sqlite:///./shortener.db"
    sqlite_busy_timeout: float = 30.0  # Seconds a writer waits for the lock

    # Authentication
    jwt_secret: str = ""
    token_ttl_hours: int = 24
    admin_token: str = ""

    # Short name generation
    short_code_strategy: str = "hex"  # Options: "hex", "alphanumeric"
    short_url_length: int = 8
    max_retries: int = 5
    allow_anonymous_links: bool = False

    # Redirect cache
    cache_backend: str = "null"  # Options: "redis", "memory", "null"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 3600  # Cache TTL in seconds (1 hour)

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # Options: "json", "text"

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        json_file="configs/config.json",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Add the JSON config file below the environment sources"""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls),
            file_secret_settings,
        )
