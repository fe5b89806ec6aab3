from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Cuenta Banco"
    data_dir: Path = Path("datos")
    state_file: str = "cuenta.dat"
    export_dir: Path = Path("exportaciones_banco")
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CUENTA_",
        extra="ignore",
    )

    @property
    def state_path(self) -> Path:
        return self.data_dir / self.state_file


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
