"""Application configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Invitation backend
    invitation_backend_url: str = "http://localhost:8080"
    invitation_timeout_seconds: float = 10.0

    # Gesture
    lock_threshold: float = 0.9
    swipe_path_length: float = 150.0

    # Overlay
    controls_auto_hide_seconds: float = 3.0

    # Call
    elapsed_timer_interval_seconds: float = 1.0
    join_with_audio: bool = True
    join_with_video: bool = True
    withdraw_abandoned_invitations: bool = False

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
