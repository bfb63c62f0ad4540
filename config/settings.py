"""
Configuration management for the scheduling API.
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "Heuristic Timetable Scheduling API"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    reload: bool = False

    # Scheduler defaults (request config overrides these)
    scheduler_max_backtrack_depth: int = 50
    scheduler_optimization_passes: int = 100
    default_class_size: int = 30  # Used when a class has no capacity set

    # Logging
    log_level: str = "INFO"

    # CORS
    cors_origins: List[str] = ["http://localhost:3000"]

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
