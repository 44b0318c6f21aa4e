import os

from dotenv import load_dotenv

# --- CONFIGURAÇÕES ---
load_dotenv()

APP_ENV = os.getenv("APP_ENV", "development").lower()
IS_PRODUCTION = APP_ENV == "production"

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL não definida no arquivo .env!")

# O primeiro segredo assina os novos tokens; todos são aceitos na verificação.
_raw_secrets = os.getenv("SESSION_SECRET", "")
SESSION_SECRETS = [secret.strip() for secret in _raw_secrets.split(",") if secret.strip()]
if not SESSION_SECRETS:
    if IS_PRODUCTION:
        raise ValueError("SESSION_SECRET é obrigatória em produção!")
    SESSION_SECRETS = ["default-secret"]

SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "basketball_session")
SESSION_MAX_AGE_DAYS = int(os.getenv("SESSION_MAX_AGE_DAYS", 30))
SESSION_ALGORITHM = "HS256"


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "sim", "on")


# Permite alterar confirmações de partidas que já aconteceram (correção de histórico).
ALLOW_PAST_MATCH_CONFIRMATION = _env_flag("ALLOW_PAST_MATCH_CONFIRMATION", True)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
