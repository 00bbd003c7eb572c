"""Built-in product defaults used when no theming override is stored."""
from __future__ import annotations

from dataclasses import dataclass

import config


@dataclass(frozen=True)
class ProductDefaults:
    name: str
    base_url: str
    slogan: str
    color: str
    logo_path: str
    background_path: str

    @classmethod
    def from_config(cls) -> "ProductDefaults":
        return cls(
            name=config.THEMING_DEFAULT_NAME,
            base_url=config.THEMING_DEFAULT_URL,
            slogan=config.THEMING_DEFAULT_SLOGAN,
            color=config.THEMING_DEFAULT_COLOR,
            logo_path=config.THEMING_DEFAULT_LOGO,
            background_path=config.THEMING_DEFAULT_BACKGROUND,
        )
