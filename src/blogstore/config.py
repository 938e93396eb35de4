from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Store configuration loaded from ``BLOG_``-prefixed environment variables."""

    model_config = SettingsConfigDict(env_prefix="BLOG_")

    database_url: str = Field("sqlite:///blog.db", description="SQLAlchemy database URL")
    database_echo: bool = Field(False, description="Log emitted SQL statements")
    default_page_limit: int = Field(10, gt=0, description="Page size when none is given")
    max_page_limit: int = Field(100, gt=0, description="Upper bound on requested page size")


settings = Settings()
