import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent / ".env")


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _get_list(name: str, fallback: str = "") -> List[str]:
    raw_value = os.getenv(name, fallback)
    if not raw_value:
        return []
    return [item.strip() for item in raw_value.split(",") if item.strip()]


def _get_int(name: str, fallback: int) -> int:
    raw_value = os.getenv(name)
    if not raw_value:
        return fallback
    try:
        return int(raw_value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name} must be an integer") from exc


def _get_bool(name: str, fallback: bool = False) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None or raw_value == "":
        return fallback
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    supabase_url: str = _require_env("SUPABASE_URL")
    supabase_service_role_key: str = _require_env("SUPABASE_SERVICE_ROLE_KEY")
    n8n_webhook_url: str = os.getenv("N8N_WEBHOOK_URL", "")
    n8n_test_webhook_url: str = os.getenv("N8N_TEST_WEBHOOK_URL", "")
    n8n_api_key: str = os.getenv("N8N_API_KEY", "")
    webhook_timeout_ms: int = _get_int("WEBHOOK_TIMEOUT", 10000)
    webhook_retry_attempts: int = _get_int("WEBHOOK_RETRY_ATTEMPTS", 3)
    notify_in_background: bool = _get_bool("NOTIFY_IN_BACKGROUND")
    business_name: str = os.getenv("BUSINESS_NAME", "KrumbKraft")
    business_phone: str = os.getenv("BUSINESS_PHONE", "")
    business_whatsapp: str = os.getenv("BUSINESS_WHATSAPP", "9876543210")
    currency_symbol: str = os.getenv("CURRENCY_SYMBOL", "₹")
    app_url: str = os.getenv("APP_URL", "http://localhost:3000")
    whatsapp_phone_number_id: str = os.getenv("WHATSAPP_PHONE_NUMBER_ID", "")
    whatsapp_access_token: str = os.getenv("WHATSAPP_ACCESS_TOKEN", "")
    whatsapp_api_version: str = os.getenv("WHATSAPP_API_VERSION", "v22.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    allowed_origins: List[str] = field(
        default_factory=lambda: _get_list("ALLOWED_ORIGINS", "*")
    )


settings = Settings()
