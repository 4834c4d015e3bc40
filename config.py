import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_PORT = 3000


@dataclass(frozen=True)
class Settings:
    api_key: str
    model_name: str = DEFAULT_MODEL
    port: int = DEFAULT_PORT
    static_dir: Path = Path("public")
    log_level: str = "INFO"


def get_api_key() -> str:
    api_key = os.getenv("API_KEY") or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    if not api_key or not api_key.strip():
        raise RuntimeError(
            "No API key found. Set API_KEY (or GEMINI_API_KEY / GOOGLE_API_KEY) in your environment or .env file."
        )
    return api_key.strip()


def load_settings() -> Settings:
    """Read settings from the environment once, honouring a local ``.env``.

    Raises ``RuntimeError`` when the API key is missing or ``PORT`` is not an
    integer; callers are expected to let that abort startup.
    """
    load_dotenv()
    raw_port = os.getenv("PORT", "").strip() or str(DEFAULT_PORT)
    try:
        port = int(raw_port)
    except ValueError as exc:
        raise RuntimeError(f"PORT must be an integer, got {raw_port!r}") from exc

    return Settings(
        api_key=get_api_key(),
        model_name=os.getenv("GEMINI_MODEL", "").strip() or DEFAULT_MODEL,
        port=port,
        static_dir=Path(os.getenv("STATIC_DIR", "").strip() or "public"),
        log_level=(os.getenv("LOG_LEVEL", "").strip() or "INFO").upper(),
    )


def setup_logging(level: str | int = logging.INFO) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
