"""Theming request handling: validate and apply settings, take uploads, serve branded assets."""
from __future__ import annotations

import asyncio
import json
import logging
import time
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from typing import Optional

from fastapi import HTTPException, UploadFile
from fastapi.responses import FileResponse, JSONResponse, Response

from theming.errors import NotFoundError, UnsupportedImageError, UploadError, ValidationError
from theming.services.app_data import AppData
from theming.services.images import BACKGROUND_MIME, process_background_image
from theming.services.l10n import L10N
from theming.services.stylesheet import COMPILED_NAME, ScssCompiler
from theming.services.theming_defaults import (
    BACKGROUND_FILE,
    IMAGES_FOLDER,
    LOGO_FILE,
    SETTING_BACKGROUND_MIME,
    SETTING_COLOR,
    SETTING_LOGO_MIME,
    SETTING_NAME,
    SETTING_SLOGAN,
    SETTING_URL,
    ThemingDefaults,
)
from theming.services.util import invert_text_color, is_valid_color

logger = logging.getLogger("theming.api")

MAX_NAME_LENGTH = 250
MAX_URL_LENGTH = 500
MAX_SLOGAN_LENGTH = 500

IMAGE_MAX_AGE = 3600
STYLESHEET_MAX_AGE = 86400
SCRIPT_MAX_AGE = 3600
EXPIRES_OFFSET = timedelta(hours=24)

_SCRIPT_TEMPLATE = """(function() {{
	OCA.Theming = {{
		name: {name},
		url: {url},
		slogan: {slogan},
		color: {color},
		inverted: {inverted},
		cacheBuster: {cache_buster}
	}};
}})();"""


class TimeFactory:
    def get_time(self) -> int:
        return int(time.time())


def _has_upload(upload: Optional[UploadFile]) -> bool:
    return upload is not None and bool(upload.filename)


class ThemingController:
    """Handles the theming endpoints. All collaborators are passed in explicitly."""

    def __init__(
        self,
        theming: ThemingDefaults,
        time_factory: TimeFactory,
        l10n: L10N,
        app_data: AppData,
        scss_compiler: ScssCompiler,
    ):
        self.theming = theming
        self.time_factory = time_factory
        self.l = l10n
        self.app_data = app_data
        self.scss_compiler = scss_compiler

    # --- settings ---

    def validate_setting(self, setting: str, value: str) -> None:
        """Raise ValidationError with a translated message if ``value`` is not acceptable for ``setting``."""
        if setting == SETTING_NAME:
            if len(value) > MAX_NAME_LENGTH:
                raise ValidationError(self.l.t("The given name is too long"))
        elif setting == SETTING_URL:
            if len(value) > MAX_URL_LENGTH:
                raise ValidationError(self.l.t("The given web address is too long"))
        elif setting == SETTING_SLOGAN:
            if len(value) > MAX_SLOGAN_LENGTH:
                raise ValidationError(self.l.t("The given slogan is too long"))
        elif setting == SETTING_COLOR:
            if not is_valid_color(value):
                raise ValidationError(self.l.t("The given color is invalid"))
        else:
            raise ValidationError(self.l.t("The given setting is not supported"))

    async def update_stylesheet(self, setting: str, value: str) -> JSONResponse:
        value = value.strip()
        try:
            self.validate_setting(setting, value)
        except ValidationError as e:
            logger.info("Rejected theming setting %s: %s", setting, e)
            return JSONResponse({"data": {"message": str(e)}, "status": "error"})

        await self.theming.set(setting, value)
        return JSONResponse({"data": {"message": self.l.t("Saved")}, "status": "success"})

    async def undo(self, setting: str) -> JSONResponse:
        value = await self.theming.undo(setting)
        return JSONResponse({"data": {"value": value, "message": self.l.t("Saved")}, "status": "success"})

    # --- uploads ---

    async def update_logo(
        self,
        new_logo: Optional[UploadFile],
        new_background: Optional[UploadFile],
    ) -> JSONResponse:
        """Store an uploaded logo and/or login background."""
        try:
            return await self._store_uploads(new_logo, new_background)
        except UnsupportedImageError:
            logger.warning("Rejected login background upload: unsupported image type")
            return JSONResponse(
                {"data": {"message": self.l.t("Unsupported image type")}, "status": "failure"},
                status_code=422,
            )
        except UploadError as e:
            return JSONResponse(
                {"data": {"message": str(e)}},
                status_code=422,
            )
        finally:
            for upload in (new_logo, new_background):
                if upload is not None:
                    await upload.close()

    async def _store_uploads(
        self,
        new_logo: Optional[UploadFile],
        new_background: Optional[UploadFile],
    ) -> JSONResponse:
        has_logo = _has_upload(new_logo)
        has_background = _has_upload(new_background)
        if not has_logo and not has_background:
            raise UploadError(self.l.t("No file uploaded"))

        name = ""
        folder = self.app_data.get_or_create_folder(IMAGES_FOLDER)

        if has_logo:
            content = await new_logo.read()
            folder.new_file(LOGO_FILE).put_content(content)
            await self.theming.set(SETTING_LOGO_MIME, new_logo.content_type or "application/octet-stream")
            name = new_logo.filename
            logger.info("Stored new logo %s (%d bytes)", name, len(content))

        if has_background:
            content = await new_background.read()
            optimized = await asyncio.to_thread(process_background_image, content)
            folder.new_file(BACKGROUND_FILE).put_content(optimized)
            await self.theming.set(SETTING_BACKGROUND_MIME, BACKGROUND_MIME)
            name = new_background.filename
            logger.info("Stored new login background %s (%d bytes)", name, len(optimized))

        return JSONResponse({"data": {"name": name, "message": self.l.t("Saved")}, "status": "success"})

    # --- public assets ---

    def _cache_headers(self, max_age: int, expires_offset: timedelta) -> dict[str, str]:
        now = datetime.fromtimestamp(self.time_factory.get_time(), tz=timezone.utc)
        return {
            "Cache-Control": f"max-age={max_age}, must-revalidate",
            "Expires": format_datetime(now + expires_offset, usegmt=True),
            "Pragma": "cache",
        }

    async def _image_response(self, file_name: str, mime: str) -> Response:
        try:
            stored = self.app_data.get_folder(IMAGES_FOLDER).get_file(file_name)
        except NotFoundError as e:
            raise HTTPException(404, "Image not found") from e
        return FileResponse(
            stored.path,
            media_type=mime or "application/octet-stream",
            headers=self._cache_headers(IMAGE_MAX_AGE, EXPIRES_OFFSET),
        )

    async def get_logo(self) -> Response:
        return await self._image_response(LOGO_FILE, await self.theming.get_logo_mime())

    async def get_login_background(self) -> Response:
        return await self._image_response(BACKGROUND_FILE, await self.theming.get_background_mime())

    async def get_stylesheet(self) -> Response:
        cache_buster = await self.theming.get_cache_buster()
        variables = await self.theming.compute_style_variables()
        await asyncio.to_thread(self.scss_compiler.process, cache_buster, variables)

        try:
            css_file = self.scss_compiler.app_data.get_folder(cache_buster).get_file(COMPILED_NAME)
        except NotFoundError as e:
            raise HTTPException(404, "Stylesheet not found") from e
        return FileResponse(
            css_file.path,
            media_type="text/css",
            headers=self._cache_headers(STYLESHEET_MAX_AGE, EXPIRES_OFFSET),
        )

    async def get_javascript(self) -> Response:
        cache_buster = await self.theming.get_cache_buster()
        color = await self.theming.get_color()
        script = _SCRIPT_TEMPLATE.format(
            name=json.dumps(await self.theming.get_name()),
            url=json.dumps(await self.theming.get_base_url()),
            slogan=json.dumps(await self.theming.get_slogan()),
            color=json.dumps(color),
            inverted=json.dumps(invert_text_color(color)),
            cache_buster=json.dumps(cache_buster),
        )
        headers = self._cache_headers(SCRIPT_MAX_AGE, timedelta(0))
        headers["Content-Disposition"] = 'attachment; filename="javascript"'
        return Response(content=script, media_type="text/javascript", headers=headers)
