from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for admin operations (delete user, payments insert, queues)
    database_url: str = ""  # Direct Postgres connection, used for auth.users lookups

    # Public URLs
    site_url: str = "http://localhost:5173"

    # Cron
    cron_secret: Optional[str] = None

    # Email (Resend)
    resend_api_key: Optional[str] = None
    mail_from: str = "Supaplate <hello@supaplate.com>"
    admin_email: Optional[str] = None

    # CAPTCHA
    turnstile_secret_key: Optional[str] = None
    hcaptcha_secret_key: Optional[str] = None

    # Payments (Toss)
    toss_payments_secret_key: Optional[str] = None
    toss_payments_api_url: str = "https://api.tosspayments.com/v1/payments/confirm"
    payment_expected_amount: float = 10_000

    # Generative AI (Gemini)
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash-lite"

    # Avatars: Supabase Storage bucket, or S3 when credentials are set
    avatar_bucket: str = "avatars"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "us-east-1"
    avatar_s3_bucket: Optional[str] = None

    # Documents listed in the sitemap
    blog_docs_dir: str = "content/blog"
    legal_docs_dir: str = "content/legal"

    # App
    app_name: str = "supaplate"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    http_timeout_seconds: float = 10.0

    # i18n / theme
    supported_locales: str = "en,es,ko"
    fallback_locale: str = "en"
    default_theme: str = "dark"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_supported_locales(self) -> List[str]:
        return [l.strip() for l in self.supported_locales.split(",") if l.strip()]

    def missing_required(self) -> List[str]:
        """Names of the Supabase/database settings that are unset or empty."""
        required = {
            "DATABASE_URL": self.database_url,
            "SUPABASE_URL": self.supabase_url,
            "SUPABASE_ANON_KEY": self.supabase_anon_key,
            "SUPABASE_SERVICE_ROLE_KEY": self.supabase_service_role_key,
        }
        return [name for name, value in required.items() if not value]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
