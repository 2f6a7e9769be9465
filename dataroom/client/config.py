from pathlib import Path

from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    """Client-side settings, read from DATAROOM_* environment variables"""

    API_BASE_URL: str = "http://localhost:8000"
    REQUEST_TIMEOUT: float = 30.0  # seconds
    WARMUP_TIMEOUT: float = 5.0
    IP_LOOKUP_URL: str = "https://api.ipify.org?format=json"
    IP_LOOKUP_TIMEOUT: float = 5.0
    TOKEN_FILE: Path = Path.home() / ".dataroom" / "credentials.json"
    USER_AGENT: str = "dataroom-cli/1.0"

    class Config:
        env_prefix = "DATAROOM_"
        env_file = ".env"
        extra = "ignore"


client_settings = ClientSettings()
