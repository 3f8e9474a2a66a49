from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "local"
    APP_NAME: str = "ZODIACS Fleet Admin"
    # Comma-separated origins for CORS. If empty, uses localhost defaults.
    CORS_ORIGINS: str = ""

    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    DATABASE_URL: str
    DIRECT_URL: str = ""  # migrations bypass the pooler when set

    @field_validator("DATABASE_URL", "DIRECT_URL", mode="after")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """Hosted Postgres gives postgres://; SQLAlchemy expects postgresql+psycopg2://."""
        if v and v.startswith("postgres://"):
            return "postgresql+psycopg2://" + v[11:]
        return v
    REDIS_URL: str = "redis://localhost:6379/0"

    # First admin account, created by start_api.py when both are set
    ADMIN_EMAIL: str = ""
    ADMIN_PASSWORD: str = ""
    ADMIN_NAME: str = "Admin"

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    MAIL_HOST: str = ""
    MAIL_PORT: int = 0
    MAIL_USER: str = ""
    MAIL_PASS: str = ""
    BOOKING_EMAIL_FROM: str = ""
    EMAIL_FROM: str = ""
    SENDGRID_API_KEY: str = ""

    BOOKING_EMAIL_LOGO_URL: str = ""
    LOGO_URL: str = ""
    LOGO_DIR: str = "./public"  # searched for logo_white.png / logo_black.png

    DEFAULT_EMAIL_LOCALE: str = "en"

    PUBLIC_SITE_BASE_URL: str = "https://zodiacsrentacar.com"
    PUBLIC_SITE_REVALIDATE_URL: str = ""
    PUBLIC_SITE_REVALIDATE_SECRET: str = ""

    # Car images
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    SUPABASE_STORAGE_BUCKET: str = "cars"

    @property
    def booking_email_from(self) -> str:
        # BOOKING_EMAIL_FROM -> EMAIL_FROM -> MAIL_USER
        return (self.BOOKING_EMAIL_FROM or self.EMAIL_FROM or self.MAIL_USER or "").strip()

    @property
    def from_address(self) -> str:
        sender = self.booking_email_from
        if sender and "@" in sender:
            return sender
        if sender and self.MAIL_USER:
            return f'"{sender}" <{self.MAIL_USER}>'
        return self.MAIL_USER

    @property
    def reply_to(self) -> str:
        return self.MAIL_USER or self.booking_email_from

    @property
    def has_mailer_config(self) -> bool:
        return bool(self.MAIL_HOST and self.MAIL_PORT and self.MAIL_USER and self.MAIL_PASS)

    @property
    def logo_url(self) -> str:
        return self.BOOKING_EMAIL_LOGO_URL or self.LOGO_URL

    @property
    def migration_url(self) -> str:
        return self.DIRECT_URL or self.DATABASE_URL


settings = Settings()
