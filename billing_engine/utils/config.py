# billing_engine/utils/config.py
import os
from dotenv import load_dotenv
from sqlalchemy.engine.url import URL

# Load from .env file for local development
load_dotenv()


def get_env(key: str, default=None):
    """
    Get an environment variable from os.environ (populated from .env locally).

    Parameters
    ----------
    key : str
        Environment variable name
    default : str, optional
        Default value if key not found

    Returns
    -------
    str
        Environment variable value or default
    """
    return os.getenv(key, default)


def get_float(key: str, default: float) -> float:
    return float(get_env(key, default))


def get_int(key: str, default: int) -> int:
    return int(get_env(key, default))


def get_bool(key: str, default: bool) -> bool:
    return str(get_env(key, default)).lower() in ("1", "true", "yes")


ENV = get_env("ENV", "dev")

# -------------------------
# Database (optional record store)
# -------------------------
DB_TYPE = get_env("DB_TYPE", "sqlite")
DB_URL = None

if DB_TYPE == "postgres":
    DB_URL = URL.create(
        drivername="postgresql+psycopg2",
        username=get_env("DB_USER"),
        password=get_env("DB_PASSWORD"),
        host=get_env("DB_HOST"),
        port=get_env("DB_PORT"),
        database=get_env("DB_NAME"),
    )
else:
    DB_PATH = get_env("DB_PATH", "data/billing.db")
    DB_URL = f"sqlite:///{DB_PATH}"

# -------------------------
# Logging
# -------------------------
LOG_LEVEL = get_env("LOG_LEVEL", "INFO")
LOG_DIR = get_env("LOG_DIR", "logs")
LOG_TO_FILE = get_bool("LOG_TO_FILE", False)

# -------------------------
# Reading validation
# -------------------------
# Consumption above this only raises an advisory warning
HIGH_USAGE_THRESHOLD = get_float("HIGH_USAGE_THRESHOLD", 500)

# -------------------------
# Late fees
# -------------------------
LATE_FEE_CAP_RATIO = get_float("LATE_FEE_CAP_RATIO", 0.5)

# -------------------------
# History / prediction
# -------------------------
PREDICTION_MIN_HISTORY = get_int("PREDICTION_MIN_HISTORY", 3)
PREDICTION_WINDOW = get_int("PREDICTION_WINDOW", 6)
CONFIDENCE_CEILING = get_float("CONFIDENCE_CEILING", 0.95)

# -------------------------
# Owner defaults (used when an owner has not saved settings yet)
# -------------------------
DEFAULT_RATE_PER_UNIT = get_float("DEFAULT_RATE_PER_UNIT", 5.0)
DEFAULT_DUE_DAY = get_int("DEFAULT_DUE_DAY", 5)
DEFAULT_LATE_FEE_PERCENTAGE = get_float("DEFAULT_LATE_FEE_PERCENTAGE", 2.0)
DEFAULT_MINIMUM_UNITS = get_float("DEFAULT_MINIMUM_UNITS", 0)
DEFAULT_MAXIMUM_UNITS = get_float("DEFAULT_MAXIMUM_UNITS", 1000)
