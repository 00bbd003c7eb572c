"""Theming settings: stored overrides layered over the product defaults."""
from __future__ import annotations

import logging
from typing import Optional

from theming.errors import NotFoundError
from theming.services.app_data import AppData
from theming.services.cache import CacheFactory
from theming.services.config_store import ConfigStore
from theming.services.defaults import ProductDefaults
from theming.services.util import invert_text_color, sanitize_html, strip_tags

logger = logging.getLogger("theming.store")

APP_ID = "theming"
IMAGES_FOLDER = "images"
LOGO_FILE = "logo"
BACKGROUND_FILE = "background"
CACHE_NAMESPACE = "theming"
SCSS_VARIABLES_KEY = "getScssVariables"

SETTING_NAME = "name"
SETTING_URL = "url"
SETTING_SLOGAN = "slogan"
SETTING_COLOR = "color"
SETTING_LOGO_MIME = "logoMime"
SETTING_BACKGROUND_MIME = "backgroundMime"
SETTING_CACHEBUSTER = "cachebuster"


class ThemingDefaults:
    """
    Reads and writes theming overrides for the instance.

    Every getter falls back to ``ProductDefaults`` when nothing is stored.
    Every write bumps the cache buster, which versions the compiled
    stylesheet, the generated script and the memoized SCSS variables.
    Values are not validated here; callers validate before calling ``set``.
    """

    def __init__(
        self,
        config_store: ConfigStore,
        app_data: AppData,
        cache_factory: CacheFactory,
        defaults: ProductDefaults,
        logo_url: str,
        background_url: str,
    ):
        self.config = config_store
        self.app_data = app_data
        self.cache = cache_factory.create(CACHE_NAMESPACE)
        self.defaults = defaults
        self.logo_url = logo_url
        self.background_url = background_url

    async def _get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return await self.config.get_app_value(APP_ID, key, default)

    async def get_name(self) -> str:
        return strip_tags(await self._get(SETTING_NAME, self.defaults.name))

    async def get_html_name(self) -> str:
        return await self._get(SETTING_NAME, self.defaults.name)

    async def get_title(self) -> str:
        return await self.get_name()

    async def get_entity(self) -> str:
        return await self.get_name()

    async def get_base_url(self) -> str:
        return await self._get(SETTING_URL, self.defaults.base_url)

    async def get_slogan(self) -> str:
        return sanitize_html(await self._get(SETTING_SLOGAN, self.defaults.slogan))

    async def get_short_footer(self) -> str:
        slogan = await self.get_slogan()
        footer = (
            f'<a href="{await self.get_base_url()}" target="_blank" rel="noreferrer">'
            f"{await self.get_entity()}</a>"
        )
        if slogan != "":
            footer += f" – {slogan}"
        return footer

    async def get_color(self) -> str:
        """Color used for the header as well as for mail headers."""
        return await self._get(SETTING_COLOR, self.defaults.color)

    async def get_logo_mime(self) -> str:
        return await self._get(SETTING_LOGO_MIME, "")

    async def get_background_mime(self) -> str:
        return await self._get(SETTING_BACKGROUND_MIME, "")

    async def get_cache_buster(self) -> str:
        return await self._get(SETTING_CACHEBUSTER, "0")

    async def get(self, setting: str) -> str:
        """Effective value of ``setting`` as the public getters present it."""
        getters = {
            SETTING_NAME: self.get_name,
            SETTING_URL: self.get_base_url,
            SETTING_SLOGAN: self.get_slogan,
            SETTING_COLOR: self.get_color,
            SETTING_LOGO_MIME: self.get_logo_mime,
            SETTING_BACKGROUND_MIME: self.get_background_mime,
            SETTING_CACHEBUSTER: self.get_cache_buster,
        }
        getter = getters.get(setting)
        if getter is None:
            return await self._get(setting, "")
        return await getter()

    def _has_image(self, name: str) -> bool:
        try:
            self.app_data.get_folder(IMAGES_FOLDER).get_file(name)
        except NotFoundError:
            return False
        return True

    async def resolve_logo_url(self) -> str:
        """Themed logo url, or the built-in logo when none was uploaded."""
        if not await self._get(SETTING_LOGO_MIME) or not self._has_image(LOGO_FILE):
            return self.defaults.logo_path
        return self.logo_url

    async def resolve_background_url(self) -> str:
        """Themed login background url, or the built-in background when none was uploaded."""
        if not await self._get(SETTING_BACKGROUND_MIME) or not self._has_image(BACKGROUND_FILE):
            return self.defaults.background_path
        return self.background_url

    async def compute_style_variables(self) -> dict[str, str]:
        """SCSS variables to overwrite, memoized until the next theming change."""
        cache_buster = await self.get_cache_buster()
        cached = self.cache.get(SCSS_VARIABLES_KEY)
        if cached and cached["cachebuster"] == cache_buster:
            return dict(cached["variables"])

        variables = {
            "theming-cachebuster": f'"{cache_buster}"',
            "image-logo": f"'{await self.resolve_logo_url()}'",
            "image-login-background": f"'{await self.resolve_background_url()}'",
        }
        if await self._get(SETTING_COLOR) is not None:
            color = await self.get_color()
            variables["color-primary"] = color
            variables["color-primary-text"] = "#000000" if invert_text_color(color) else "#ffffff"

        self.cache.set(SCSS_VARIABLES_KEY, {"cachebuster": cache_buster, "variables": variables})
        return dict(variables)

    async def _increase_cache_buster(self) -> int:
        current = int(await self.get_cache_buster() or 0)
        new_value = current + 1
        await self.config.set_app_value(APP_ID, SETTING_CACHEBUSTER, str(new_value))
        self.cache.invalidate(SCSS_VARIABLES_KEY)
        return new_value

    async def set(self, setting: str, value: str) -> None:
        """Store ``value`` for ``setting`` and bump the cache buster."""
        await self.config.set_app_value(APP_ID, setting, value)
        cache_buster = await self._increase_cache_buster()
        logger.info("Theming setting %s updated (cache buster %d)", setting, cache_buster)

    async def undo(self, setting: str) -> str:
        """Drop the override for ``setting`` and return the value now in effect."""
        # The cache buster itself is never reset
        if setting != SETTING_CACHEBUSTER:
            await self.config.delete_app_value(APP_ID, setting)
        cache_buster = await self._increase_cache_buster()
        logger.info("Theming setting %s reverted (cache buster %d)", setting, cache_buster)

        if setting == SETTING_NAME:
            return await self.get_entity()
        if setting == SETTING_URL:
            return await self.get_base_url()
        if setting == SETTING_SLOGAN:
            return await self.get_slogan()
        if setting == SETTING_COLOR:
            return await self.get_color()
        return ""

    revert = undo

    async def to_dict(self) -> dict:
        color = await self.get_color()
        return {
            "name": await self.get_name(),
            "html_name": await self.get_html_name(),
            "title": await self.get_title(),
            "entity": await self.get_entity(),
            "url": await self.get_base_url(),
            "slogan": await self.get_slogan(),
            "short_footer": await self.get_short_footer(),
            "color": color,
            "inverted": invert_text_color(color),
            "logo": await self.resolve_logo_url(),
            "background": await self.resolve_background_url(),
            "cachebuster": await self.get_cache_buster(),
        }
