from pydantic_settings import BaseSettings
from typing import List, Any
import json


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


def parse_extensions(v: Any) -> List[str]:
    """Parse allowed extensions from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        return [ext.strip().lower().lstrip('.') for ext in v.split(',') if ext.strip()]
    return []


DEFAULT_NDA_CONTENT = """MUTUAL NON-DISCLOSURE AGREEMENT

This agreement governs access to the confidential materials made available
in this investor data room.

1. Confidential Information. All documents, financial statements, projections,
   product plans and other materials made available through the data room are
   confidential information of the company.

2. Obligations. The recipient shall hold confidential information in strict
   confidence, use it solely to evaluate a potential investment, and not
   disclose it to any third party without prior written consent.

3. Term. These obligations survive for three (3) years from the date of
   acceptance.

4. Electronic Signature. Typing your full legal name and accepting this
   agreement constitutes a binding electronic signature.
"""


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "Investor Data Room"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    SECRET_KEY: str = "CHANGE_ME"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # ==========================================
    # Database (in-memory by default, reset on restart)
    # ==========================================
    DATABASE_URL: str = "sqlite+aiosqlite://"
    DB_ECHO: bool = False

    # ==========================================
    # JWT
    # ==========================================
    JWT_SECRET_KEY: str = "CHANGE_ME"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 1 day
    BCRYPT_ROUNDS: int = 12

    # ==========================================
    # One-time passcodes
    # ==========================================
    OTP_LENGTH: int = 6
    OTP_EXPIRE_MINUTES: int = 10
    OTP_MAX_ATTEMPTS: int = 5

    # ==========================================
    # Demo mode
    # ==========================================
    DEMO_MODE: bool = True  # Any email may log in, auto-login endpoint enabled
    SEED_DEMO_DATA: bool = True

    # ==========================================
    # NDA
    # ==========================================
    NDA_VERSION: str = "1.0"
    NDA_EFFECTIVE_DATE: str = "2024-01-01"
    NDA_CONTENT: str = DEFAULT_NDA_CONTENT

    # ==========================================
    # CORS (stored as comma-separated string, parsed to list)
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://127.0.0.1:3000"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    # ==========================================
    # Rate Limiting
    # ==========================================
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 120
    OTP_RATE_LIMIT: str = "10/minute"
    LOGIN_RATE_LIMIT: str = "10/minute"

    # ==========================================
    # File Upload
    # ==========================================
    MAX_UPLOAD_SIZE: int = 26214400  # 25MB
    ALLOWED_EXTENSIONS_STR: str = "pdf,doc,docx,xls,xlsx,ppt,pptx,txt,csv,png,jpg,jpeg"

    @property
    def ALLOWED_EXTENSIONS(self) -> List[str]:
        """Parse allowed extensions from comma-separated string"""
        return parse_extensions(self.ALLOWED_EXTENSIONS_STR)

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""  # Empty disables the rotating file handler

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings

    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


# Create settings instance
settings = Settings()
