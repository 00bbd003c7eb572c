"""Configuration for the theming service."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Database (app config key/value store and web users)
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{Path(__file__).parent / 'theming.db'}",
)

# Root of the app data tree (uploaded images, compiled stylesheets)
APP_DATA_DIR = Path(os.getenv("APP_DATA_DIR", str(Path(__file__).parent / "appdata")))

# Built-in product defaults, used whenever no override is stored
THEMING_DEFAULT_NAME = os.getenv("THEMING_DEFAULT_NAME", "Nextcloud")
THEMING_DEFAULT_URL = os.getenv("THEMING_DEFAULT_URL", "https://nextcloud.com")
THEMING_DEFAULT_SLOGAN = os.getenv("THEMING_DEFAULT_SLOGAN", "a safe home for all your data")
THEMING_DEFAULT_COLOR = os.getenv("THEMING_DEFAULT_COLOR", "#0082c9")
THEMING_DEFAULT_LOGO = os.getenv("THEMING_DEFAULT_LOGO", "/core/img/logo.svg")
THEMING_DEFAULT_BACKGROUND = os.getenv("THEMING_DEFAULT_BACKGROUND", "/core/img/background.jpg")

# Translations (gettext catalogs under theming/locale)
THEMING_LOCALE = os.getenv("THEMING_LOCALE", "en")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Web auth (JWT secret, initial admin bootstrap)
JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-production-use-long-random-string")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_DAYS = int(os.getenv("JWT_EXPIRE_DAYS", "7"))
INITIAL_ADMIN_USERNAME = os.getenv("INITIAL_ADMIN_USERNAME", "admin")
INITIAL_ADMIN_PASSWORD = os.getenv("INITIAL_ADMIN_PASSWORD", "")  # Set to bootstrap first admin
