import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_GRAPHS_DIR = os.path.join(os.path.dirname(__file__), "knowledge", "graphs")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RULEGRAPH_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Expansion steps a walk may take before it stops with what it has collected.
    max_rounds: int = Field(default=10, ge=1)
    graphs_dir: str = DEFAULT_GRAPHS_DIR
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
