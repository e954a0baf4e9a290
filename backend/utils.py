import os
from dotenv import load_dotenv

# load .env when present (local dev)
load_dotenv()

def get_env(key: str, default: str = "") -> str:
    return os.getenv(key, default)

def env_flag(key: str, default: str = "false") -> bool:
    return get_env(key, default).strip().lower() in {"1", "true", "yes", "on"}
