import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


class Settings:
    """Application settings loaded from environment variables."""
    
    def __init__(self):
        self.APP_NAME = os.environ.get("APP_NAME", "Contact Distributor")
        self.ENV = os.environ.get("ENV", "development")
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
        
        # Database Configuration (DATABASE_URL wins over the DB_* parts)
        self.DATABASE_URL = os.environ.get("DATABASE_URL", "")
        self.DB_HOST = os.environ.get("DB_HOST", "localhost")
        self.DB_PORT = os.environ.get("DB_PORT", "5432")
        self.DB_USER = os.environ.get("DB_USER", "postgres")
        self.DB_PASS = os.environ.get("DB_PASS", "postgres")
        self.DB_NAME = os.environ.get("DB_NAME", "contact_distributor")
        
        # Session Token Configuration
        self.JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "change-me-in-production-to-random-secret")
        self.JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
        self.JWT_EXPIRE_HOURS = int(os.environ.get("JWT_EXPIRE_HOURS", "24"))
        
        # Upload Configuration
        self.UPLOAD_DIR = os.environ.get("UPLOAD_DIR", "uploads")
        self.MAX_UPLOAD_MB = int(os.environ.get("MAX_UPLOAD_MB", "10"))
        
        # CORS
        self.CORS_ORIGINS = [
            origin.strip()
            for origin in os.environ.get(
                "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
            ).split(",")
            if origin.strip()
        ]
    
    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_MB * 1024 * 1024
    
    def __repr__(self):
        return (
            f"Settings(APP_NAME={self.APP_NAME}, ENV={self.ENV}, "
            f"LOG_LEVEL={self.LOG_LEVEL}, UPLOAD_DIR={self.UPLOAD_DIR}, "
            f"MAX_UPLOAD_MB={self.MAX_UPLOAD_MB})"
        )


settings = Settings()
