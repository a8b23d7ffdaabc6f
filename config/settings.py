"""
Configuration management for the timeslot scheduling API.
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "Timeslot CSP Scheduling API"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    reload: bool = False

    # Solver (exhaustive search with no budget unless configured)
    solver_time_limit_seconds: Optional[float] = None
    solver_max_nodes: Optional[int] = None
    solver_incremental_counters: bool = False
    solver_clear_on_backtrack: bool = False

    # Logging
    log_level: str = "INFO"

    # CORS
    cors_origins: List[str] = ["http://localhost:3000"]

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
