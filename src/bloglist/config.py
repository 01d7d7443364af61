from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = Field("sqlite:///bloglist.db")
    api_title: str = Field("Blog List API")
    api_prefix: str = Field("/api")
    access_token_expire_minutes: int = Field(60)
    jwt_secret: str = Field("secret")
    jwt_algorithm: str = Field("HS256")
    bcrypt_rounds: int = Field(10, ge=4, le=31)
    min_username_length: int = Field(3)
    min_password_length: int = Field(3)
    max_password_bytes: int = Field(72)
    log_level: str = Field("INFO")


settings = Settings()
