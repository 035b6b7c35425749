"""Configuration management for the application."""
import os
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Cloud Controller configuration
    cloud_controller_uri: str = os.getenv("CLOUD_CONTROLLER_URI", "http://api.localhost")
    cloud_controller_ssl_verify: bool = True

    # Seconds between two discoveries of the same data set
    cloud_controller_discovery_interval: int = 30

    # UAA password grant used to obtain the bearer token
    uaa_admin_credentials_username: str = "admin"
    uaa_admin_credentials_password: str = "admin"
    uaa_client_authorization: str = "Basic Y2Y6"  # client "cf", empty secret

    # HTTP client settings
    http_timeout: int = 30

    # Address the API is served on
    server_host: str = "0.0.0.0"
    server_port: int = 8000

    # Application settings
    log_level: str = "INFO"

    class Config:
        """Pydantic config."""
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
