"""Configuration settings for the storage service."""
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


@dataclass
class StorageSettings:
    default_ttl_ms: int = int(os.getenv("STORAGE_DEFAULT_TTL_MS", 10_000))
    # Relative paths resolve against the working directory
    snapshot_path: str = os.getenv("STORAGE_SNAPSHOT_PATH", "storage-state.json")
    reaper_initial_delay_ms: int = int(os.getenv("STORAGE_REAPER_INITIAL_DELAY_MS", 1))

    @property
    def reaper_period_ms(self) -> int:
        return self.default_ttl_ms // 10


@dataclass
class ServerSettings:
    host: str = os.getenv("STORAGE_HOST", "0.0.0.0")
    port: int = int(os.getenv("STORAGE_PORT", 8080))
    log_level: str = os.getenv("STORAGE_LOG_LEVEL", "INFO")


@dataclass
class Settings:
    storage: StorageSettings = field(default_factory=StorageSettings)
    server: ServerSettings = field(default_factory=ServerSettings)


settings = Settings()
