from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    PROJECT_NAME: str = "Folio"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"

    # Tokens are issued by the hosted identity provider; we only verify them
    SECRET_KEY: str = ""  # Must be set via environment variable
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    DATABASE_URL: str = "sqlite:///./folio.db"

    # Frontend URL for CORS, public URL for links in emails
    FRONTEND_URL: str = "http://localhost:5173"
    PUBLIC_URL: str = "http://localhost:5173"

    # Serverless functions (mounted locally under /functions by default)
    IMAGE_FUNCTION_URL: str = "http://localhost:8000/functions/process-image/"
    NOTIFICATION_FUNCTION_URL: str = "http://localhost:8000/functions/send-notification/"
    FUNCTIONS_AUTH_TOKEN: str = ""

    # S3-compatible object storage for processed images
    STORAGE_ENDPOINT: str = ""
    STORAGE_ACCESS_KEY: str = ""
    STORAGE_SECRET_KEY: str = ""
    STORAGE_REGION: str = "auto"
    STORAGE_BUCKET: str = "blog-images"
    STORAGE_PUBLIC_URL: str = ""  # Base URL objects are served from

    # Resend Email
    RESEND_API_KEY: str = ""
    FROM_EMAIL: str = "Folio <noreply@folio.blog>"

    # Error tracking
    SENTRY_DSN: str = ""

    # Slug insert attempts before giving up on a collision
    SLUG_MAX_ATTEMPTS: int = 5

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra="ignore")


settings = Settings()
