"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./themepress.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None


class ThemeSettings(BaseModel):
    root: Path = Field(default=Path("themes"))
    history_page_size: int = Field(default=20, ge=1, le=200)
    sync_batch_size: int = Field(default=50, ge=1)
    auto_publish_on_sync: bool = False
    default_author: str = "system"


class RenderSettings(BaseModel):
    placeholder_token: str = "{{ content_for_layout }}"
    default_layout: str = "theme"
    embed_assets: bool = True
    asset_url_prefix: str = "/assets"


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "ThemePress"
    api_prefix: str = "/api"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    themes: ThemeSettings = ThemeSettings()
    render: RenderSettings = RenderSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def themes_root(self) -> Path:
        return self.themes.root


@lru_cache()
def get_settings() -> Settings:
    return Settings()
