"""Environment configuration for the recurring task engine."""
import os
from dotenv import load_dotenv

# Load environment variables from a local .env file if present
load_dotenv()

ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")

# Fallback to SQLite for local development
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./recurring_tasks.db")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

# Horizon materialized right after a template is created through the API
INITIAL_GENERATION_DAYS = int(os.environ.get("INITIAL_GENERATION_DAYS", "90"))

# Thread pool size for generating all templates of one owner
GENERATION_MAX_WORKERS = int(os.environ.get("GENERATION_MAX_WORKERS", "4"))
