"""Configuration management using Pydantic Settings"""
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .rules import DEFAULT_COLOR_TABLE, ColorTable, load_color_table


class Settings(BaseSettings):
    """Application settings, read from SKU_NORMALIZER_* environment variables"""
    app_name: str = Field(default="sku-normalizer")
    log_level: str = Field(default="INFO")
    color_table_path: Optional[str] = Field(default=None)
    export_filename: str = Field(default="normalized_skus.csv")
    max_upload_bytes: int = Field(default=1024 * 1024, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="SKU_NORMALIZER_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    def color_table(self) -> ColorTable:
        return _color_table_at(self.color_table_path)


@lru_cache
def _color_table_at(path: Optional[str]) -> ColorTable:
    if not path:
        return DEFAULT_COLOR_TABLE
    return load_color_table(path)


@lru_cache
def get_settings() -> Settings:
    return Settings()
