"""App-scoped key/value configuration store."""
from __future__ import annotations

import logging
from typing import Optional, Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from theming.errors import StorageError
from theming.models import AppConfigValue

logger = logging.getLogger("theming.config")


class ConfigStore(Protocol):
    """Key/value settings grouped by app id. Values are always strings."""

    async def get_app_value(self, app: str, key: str, default: Optional[str] = None) -> Optional[str]:
        ...

    async def set_app_value(self, app: str, key: str, value: str) -> None:
        ...

    async def delete_app_value(self, app: str, key: str) -> None:
        ...


class SqlConfigStore:
    """ConfigStore backed by the app_config table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_app_value(self, app: str, key: str, default: Optional[str] = None) -> Optional[str]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(AppConfigValue.configvalue).where(
                        AppConfigValue.appid == app, AppConfigValue.configkey == key
                    )
                )
                value = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(f"Could not read {app}.{key}") from e
        return value if value is not None else default

    async def set_app_value(self, app: str, key: str, value: str) -> None:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(AppConfigValue).where(
                        AppConfigValue.appid == app, AppConfigValue.configkey == key
                    )
                )
                row = result.scalar_one_or_none()
                if row:
                    row.configvalue = value
                else:
                    session.add(AppConfigValue(appid=app, configkey=key, configvalue=value))
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Could not write {app}.{key}") from e
        logger.debug("Set %s.%s", app, key)

    async def delete_app_value(self, app: str, key: str) -> None:
        try:
            async with self._session_factory() as session:
                await session.execute(
                    delete(AppConfigValue).where(
                        AppConfigValue.appid == app, AppConfigValue.configkey == key
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Could not delete {app}.{key}") from e
        logger.debug("Deleted %s.%s", app, key)

