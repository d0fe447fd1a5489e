from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str = "sqlite:///./mapty.db"
    storage_backend: str = "sql"  # "sql" (database_url) | "memory" (lost on restart)
    storage_key: str = "workouts"
    debug: bool = False
    cors_origins: str = "http://localhost:8000,http://127.0.0.1:8000"
    enable_hsts: bool = False  # Set True in production behind HTTPS

    # Map view
    map_zoom_level: int = 13
    map_spread_zoom_level: int = 12  # used when saved workouts are spread out
    focus_zoom_level: int = 15  # zoom when a list item is clicked
    pan_duration_seconds: float = 1.0
    tile_url: str = "https://{s}.tile.openstreetmap.fr/hot/{z}/{x}/{y}.png"
    tile_attribution: str = (
        '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
    )

    # Speech synthesis (read by the browser when draining /speech)
    speech_enabled: bool = True
    speech_lang: str = "en-US"
    speech_rate: float = 0.7

    @property
    def cors_origin_list(self) -> list[str]:
        """Comma-separated CORS origins as a list; "*" when empty."""
        origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        return origins or ["*"]

    def validate_storage_config(self) -> None:
        """Raise if the storage backend name is unknown."""
        if self.storage_backend not in ("sql", "memory"):
            raise RuntimeError(f"Unknown STORAGE_BACKEND {self.storage_backend!r}, expected 'sql' or 'memory'")


settings = Settings()
