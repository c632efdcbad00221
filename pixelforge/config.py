"""Engine configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine settings."""

    # Command history
    HISTORY_DEPTH: int = 100  # Oldest undo entries are evicted beyond this

    # Cels
    MAX_LINK_DEPTH: int = 10  # Longest link chain get_cel will follow

    # Quantization: alpha at or below this value counts as transparent
    TRANSPARENCY_THRESHOLD: int = 127

    # New documents
    DEFAULT_FRAME_DURATION_MS: int = 100
    DEFAULT_PERSPECTIVE: str = "flat"

    model_config = {"env_prefix": "PIXELFORGE_"}


settings = Settings()
