"""Application configuration using pydantic-settings."""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys
    gemini_api_key: str = ""

    # Server
    port: int = 8080
    host: str = "127.0.0.1"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "text"

    # Uploads
    max_upload_size: int = 10 * 1024 * 1024  # 10MB
    vision_max_dim: int = 1400
    jpeg_quality: int = 78

    # CORS
    cors_origins: str = "*"  # Comma-separated origins or "*" for all

    # Gemini Settings
    gemini_text_model: str = "gemini-3-flash-preview"
    gemini_image_model: str = "gemini-2.5-flash-image"
    gemini_maps_model: str = "gemini-2.5-flash"
    gemini_temperature: float = 0.7
    image_aspect_ratio: str = "4:3"

    # Recipe generation
    response_language: str = "Korean"
    recipe_count: int = 3
    strict_recipe_schema: bool = False

    # Nearby stores
    store_result_limit: int = 5

    # Saved recipes bucket
    saved_recipes_path: str = "data/fridge_chef_storage.json"
    saved_recipes_key: str = "fridge-chef.saved-recipes"

    # Performance logging (AI calls are slow, thresholds are generous)
    slow_request_threshold: float = 10.0
    very_slow_request_threshold: float = 30.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Get list of CORS origins."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]


# Global settings instance
settings = Settings()
