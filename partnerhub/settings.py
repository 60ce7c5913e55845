import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()  # default search
# Also load from project root and partnerhub/.env if present
_PKG_DIR = Path(__file__).resolve().parent
_ROOT_DIR = _PKG_DIR.parent
load_dotenv(_ROOT_DIR / ".env")
load_dotenv(_PKG_DIR / ".env")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# --- Oracle (Gemini, grounded search) -----------------------------------------
# GOOGLE_API_KEY is what google-genai reads by default; GEMINI_API_KEY wins when both exist.
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
ORACLE_MODEL = os.getenv("ORACLE_MODEL", "gemini-2.5-flash")

# --- Insights (OpenAI via LangChain) ------------------------------------------
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
LANGCHAIN_MODEL = os.getenv("LANGCHAIN_MODEL", "gpt-4o-mini")
TEMPERATURE = float(os.getenv("TEMPERATURE", "0.7"))

# Turn off all LangChain tracing/telemetry
os.environ["LANGCHAIN_TRACING"] = "false"
os.environ["LANGCHAIN_TRACING_V2"] = "false"
os.environ.pop("LANGSMITH_API_KEY", None)

# --- Storage ------------------------------------------------------------------
# "file" keeps the key-value blobs as JSON files under PARTNERHUB_DATA_DIR;
# "postgres" stores them in a single table reachable through POSTGRES_DSN.
STORE_BACKEND = (os.getenv("PARTNERHUB_STORE_BACKEND") or "file").strip().lower()
DATA_DIR = Path(os.getenv("PARTNERHUB_DATA_DIR", str(_ROOT_DIR / ".partnerhub_data"))).expanduser()
POSTGRES_DSN = os.getenv("POSTGRES_DSN")
DB_MAX_CONN = int(os.getenv("DB_MAX_CONN", "4"))
PG_CONNECT_TIMEOUT_S = int(float(os.getenv("PG_CONNECT_TIMEOUT_S", "3") or 3))

# Seed the demo partner when the collection has never been saved
SEED_DEMO_DATA = _env_bool("PARTNERHUB_SEED_DEMO_DATA", True)

# Storage keys (same names the browser build used)
COMPANIES_KEY = "partner_hub_v2_cos"
MAP_VIEW_KEY = "partner_hub_map_view_v2"
RECENT_QUERIES_KEY = "recent_prospecting_queries"
RECENT_QUERIES_LIMIT = 5

# --- Public lookups -----------------------------------------------------------
BRASILAPI_CNPJ_URL = os.getenv("BRASILAPI_CNPJ_URL", "https://brasilapi.com.br/api/cnpj/v1")
VIACEP_URL = os.getenv("VIACEP_URL", "https://viacep.com.br/ws")
NOMINATIM_URL = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org/search")
LOOKUP_TIMEOUT_S = float(os.getenv("LOOKUP_TIMEOUT_S", "10"))
LOOKUP_USER_AGENT = os.getenv("LOOKUP_USER_AGENT", "PartnerHub/1.0 (+https://partnerhub.local)")

# --- Business defaults --------------------------------------------------------
DEFAULT_COMMISSION_RATE = float(os.getenv("DEFAULT_COMMISSION_RATE", "5"))
AI_IMPORT_MANAGER = os.getenv("AI_IMPORT_MANAGER", "Fila de Triagem IA")
PUBLIC_REGISTRATION_MANAGER = os.getenv("PUBLIC_REGISTRATION_MANAGER", "Cadastro Público")

# --- Audit trail -------------------------------------------------------------
# JSON-lines copies of prospecting, import and backup events. Local dev
# environments default to .log_api; elsewhere the file copy is off unless set.
APP_ENV = (os.getenv("ENVIRONMENT") or os.getenv("PY_ENV") or "dev").strip().lower()
_audit_dir = os.getenv("PARTNERHUB_AUDIT_LOG_DIR") or os.getenv("TROUBLESHOOT_API_LOG_DIR")
if not _audit_dir and APP_ENV in {"dev", "development", "local", "localhost"}:
    _audit_dir = ".log_api"
AUDIT_LOG_DIR = Path(_audit_dir).expanduser() if _audit_dir else None

# Map camera default (São Paulo centre)
DEFAULT_MAP_CENTER = (-23.5505, -46.6333)
DEFAULT_MAP_ZOOM = 12
