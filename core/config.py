"""Configuration management for Math Tag Cleaner."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _get_base_dir() -> Path:
    """Project root, overridable with MATHCLEAN_HOME."""
    if home := os.getenv("MATHCLEAN_HOME"):
        return Path(home).expanduser()
    return Path(__file__).resolve().parents[1]


_env_file = _get_base_dir() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Application settings."""

    base_dir: Path = _get_base_dir()
    data_dir: Path = base_dir / "data"
    export_dir: Path = data_dir / "exports"
    host: str = os.getenv("MATHCLEAN_HOST", "127.0.0.1")
    port: int = int(os.getenv("MATHCLEAN_PORT", "8000"))
    log_level: str = os.getenv("MATHCLEAN_LOG_LEVEL", "INFO")
    # "rich" renders MathML/HTML, "plain" downgrades to plain text
    strategy: str = os.getenv("MATHCLEAN_STRATEGY", "rich")
    error_color: str = os.getenv("MATHCLEAN_ERROR_COLOR", "#cc0000")
    strict: bool = _env_flag("MATHCLEAN_STRICT", False)
    trust: bool = _env_flag("MATHCLEAN_TRUST", True)
    word_font_family: str = os.getenv("MATHCLEAN_WORD_FONT", "Cambria,serif")
    word_font_size: str = os.getenv("MATHCLEAN_WORD_FONT_SIZE", "12pt")
    # How long `clip` mode keeps serving the clipboard before exiting (X11)
    clipboard_handoff_ms: int = int(os.getenv("MATHCLEAN_CLIPBOARD_HANDOFF_MS", "2000"))
    export_stylesheet_url: str = os.getenv(
        "MATHCLEAN_EXPORT_STYLESHEET",
        "https://fred-wang.github.io/MathFonts/LatinModern/mathfonts.css",
    )


settings = Settings()
