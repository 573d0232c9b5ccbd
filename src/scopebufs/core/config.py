# scopebufs/src/scopebufs/core/config.py

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Filter patterns (regular expressions matched against item names)
    include_patterns: List[str] = Field(default_factory=list)
    exclude_patterns: List[str] = Field(default_factory=list)
    hidden_patterns: List[str] = Field(default_factory=lambda: ["^ "])
    kill_exclude_patterns: List[str] = Field(default_factory=list)

    # Toggles
    include_buried: bool = Field(default=True)
    prefer_local_buffers: bool = Field(default=True)

    # Snapshot persistence and logging
    database_url: str = Field(default="sqlite:///scopebufs.db")
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SCOPEBUFS_",
        extra="ignore",
    )


# Instantiate settings
settings = Settings()

# Module level shortcut
DATABASE_URL = settings.database_url
