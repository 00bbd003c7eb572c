"""Theming API: public branded assets, admin-only setting updates."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel

from theming.models import User
from theming.services.theming_defaults import ThemingDefaults
from web.api.dependencies import get_theming_controller, get_theming_defaults
from web.api.theming_controller import ThemingController
from web.auth import require_admin_user

router = APIRouter(prefix="/api/theming", tags=["theming"])


class SettingUpdate(BaseModel):
    setting: str
    value: str = ""


class SettingUndo(BaseModel):
    setting: str


class ThemeResponse(BaseModel):
    name: str
    html_name: str
    title: str
    entity: str
    url: str
    slogan: str
    short_footer: str
    color: str
    inverted: bool
    logo: str
    background: str
    cachebuster: str


@router.get("", response_model=ThemeResponse)
async def get_theme(theming: ThemingDefaults = Depends(get_theming_defaults)):
    """Effective theme values (public, for frontends)."""
    return ThemeResponse(**await theming.to_dict())


@router.post("/settings")
async def update_stylesheet(
    body: SettingUpdate,
    admin: User = Depends(require_admin_user),
    controller: ThemingController = Depends(get_theming_controller),
):
    """Update one theming setting (admin only)."""
    return await controller.update_stylesheet(body.setting, body.value)


@router.post("/images")
async def update_logo(
    uploadlogo: Optional[UploadFile] = File(None),
    upload_login_background: Optional[UploadFile] = File(None, alias="upload-login-background"),
    admin: User = Depends(require_admin_user),
    controller: ThemingController = Depends(get_theming_controller),
):
    """Upload a logo and/or login background (admin only)."""
    return await controller.update_logo(uploadlogo, upload_login_background)


@router.post("/undo")
async def undo(
    body: SettingUndo,
    admin: User = Depends(require_admin_user),
    controller: ThemingController = Depends(get_theming_controller),
):
    """Revert one theming setting to its default (admin only)."""
    return await controller.undo(body.setting)


@router.get("/logo", name="theming_logo")
async def get_logo(controller: ThemingController = Depends(get_theming_controller)):
    return await controller.get_logo()


@router.get("/loginbackground", name="theming_login_background")
async def get_login_background(controller: ThemingController = Depends(get_theming_controller)):
    return await controller.get_login_background()


@router.get("/styles", name="theming_stylesheet")
async def get_stylesheet(controller: ThemingController = Depends(get_theming_controller)):
    return await controller.get_stylesheet()


@router.get("/js", name="theming_javascript")
async def get_javascript(controller: ThemingController = Depends(get_theming_controller)):
    return await controller.get_javascript()
