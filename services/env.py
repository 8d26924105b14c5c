import os


def env_flag(name: str, default: str = "false") -> bool:
    """Read a boolean environment variable ("1", "true", "yes", "on" are true)."""
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}
