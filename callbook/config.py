import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./callbook.db")

# Redis - REDIS_URL wins over the individual settings when present
REDIS_URL = os.getenv("REDIS_URL")
REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD") or None
REDIS_DB = int(os.getenv("REDIS_DB", "0"))
REDIS_SSL = os.getenv("REDIS_SSL", "false").lower() == "true"

# HTTP server
PORT = int(os.getenv("PORT", "3001"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Call state cache: both key families expire 30 minutes after the last write
CALL_STATE_TTL_SECONDS = int(os.getenv("CALL_STATE_TTL_SECONDS", str(30 * 60)))

# Outbound call queue
OUTBOUND_CALL_QUEUE = os.getenv("OUTBOUND_CALL_QUEUE", "outbound-calls")
CALL_MAX_ATTEMPTS = int(os.getenv("CALL_MAX_ATTEMPTS", "3"))
CALL_RETRY_BASE_DELAY = float(os.getenv("CALL_RETRY_BASE_DELAY", "5"))
CALL_KEEP_RESULT_SECONDS = int(os.getenv("CALL_KEEP_RESULT_SECONDS", "3600"))

# Call placement. The simulated placer stands in for telephony until it exists.
CALL_SIMULATION_DELAY = float(os.getenv("CALL_SIMULATION_DELAY", "5"))
CALL_TIMEOUT_SECONDS = float(os.getenv("CALL_TIMEOUT_SECONDS", "120"))
