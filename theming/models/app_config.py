"""App-scoped key/value configuration (theming overrides, cache buster)."""
from __future__ import annotations

from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from theming.models.base import Base


class AppConfigValue(Base):
    """One configuration value, namespaced by app id."""

    __tablename__ = "app_config"
    __table_args__ = (UniqueConstraint("appid", "configkey", name="uq_app_config_appid_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    appid: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    configkey: Mapped[str] = mapped_column(String(64), nullable=False)
    configvalue: Mapped[str] = mapped_column(Text, nullable=False)
