"""Wiring of theming collaborators for request handlers.

Each collaborator is its own dependency so tests can swap one out through
``app.dependency_overrides`` without touching the rest.
"""
from __future__ import annotations

from fastapi import Depends, Request

import config
from theming.models.base import async_session_factory
from theming.services.app_data import AppData
from theming.services.cache import cache_factory
from theming.services.config_store import ConfigStore, SqlConfigStore
from theming.services.defaults import ProductDefaults
from theming.services.l10n import L10N, get_l10n
from theming.services.stylesheet import ScssCompiler
from theming.services.theming_defaults import APP_ID, ThemingDefaults
from web.api.theming_controller import ThemingController, TimeFactory

CSS_APP_ID = "css"


def get_config_store() -> ConfigStore:
    return SqlConfigStore(async_session_factory)


def get_app_data() -> AppData:
    return AppData(config.APP_DATA_DIR, APP_ID)


def get_scss_compiler() -> ScssCompiler:
    return ScssCompiler(AppData(config.APP_DATA_DIR, CSS_APP_ID))


def get_time_factory() -> TimeFactory:
    return TimeFactory()


def get_translator() -> L10N:
    return get_l10n(config.THEMING_LOCALE)


def get_theming_defaults(
    request: Request,
    config_store: ConfigStore = Depends(get_config_store),
    app_data: AppData = Depends(get_app_data),
) -> ThemingDefaults:
    return ThemingDefaults(
        config_store,
        app_data,
        cache_factory,
        ProductDefaults.from_config(),
        logo_url=str(request.app.url_path_for("theming_logo")),
        background_url=str(request.app.url_path_for("theming_login_background")),
    )


def get_theming_controller(
    theming: ThemingDefaults = Depends(get_theming_defaults),
    time_factory: TimeFactory = Depends(get_time_factory),
    l10n: L10N = Depends(get_translator),
    app_data: AppData = Depends(get_app_data),
    scss_compiler: ScssCompiler = Depends(get_scss_compiler),
) -> ThemingController:
    return ThemingController(theming, time_factory, l10n, app_data, scss_compiler)
