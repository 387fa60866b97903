# clinic_portal/client/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Client configuration, read from ``CLINIC_CLIENT_*`` environment variables."""
    model_config = SettingsConfigDict(env_prefix="CLINIC_CLIENT_", env_file=".env", extra="ignore")

    API_BASE_URL: str = "http://localhost:8000/functions/v1/clinic-server"
    ANON_KEY: str = ""
    REQUEST_TIMEOUT: float = 30.0
    # Profile fetch during bootstrap gives up quickly and falls back to demo mode
    PROFILE_TIMEOUT: float = 5.0
    STORAGE_PATH: str = "clinic-local-storage.json"

    # Offline report analysis
    GEMINI_API_KEY: str = ""
    ANALYSIS_TIMEOUT_SECONDS: float = 60.0
