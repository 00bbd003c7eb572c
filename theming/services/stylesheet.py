"""Compile the theming SCSS into a cache-buster scoped CSS artifact."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

import sass

from theming.errors import NotFoundError, StylesheetCompileError
from theming.services.app_data import AppData

logger = logging.getLogger("theming.scss")

THEMING_SCSS = Path(__file__).resolve().parent.parent / "css" / "theming.scss"
COMPILED_NAME = "theming.css"


def _variables_prelude(variables: Mapping[str, str]) -> str:
    return "".join(f"${name}: {value};\n" for name, value in variables.items())


class ScssCompiler:
    """Compiles a stylesheet into ``<app data>/<cache buster>/<name>.css``.

    A compiled file is reused as long as the cache buster it was built for is
    current; any theming change bumps the buster and therefore the folder.
    """

    def __init__(self, app_data: AppData, source: Path = THEMING_SCSS):
        self.app_data = app_data
        self.source = source

    def is_cached(self, cache_buster: str) -> bool:
        try:
            return self.app_data.get_folder(cache_buster).file_exists(COMPILED_NAME)
        except NotFoundError:
            return False

    def compile(self, variables: Mapping[str, str]) -> str:
        scss = _variables_prelude(variables) + self.source.read_text(encoding="utf-8")
        try:
            return sass.compile(
                string=scss,
                output_style="compressed",
                include_paths=[str(self.source.parent)],
            )
        except sass.CompileError as e:
            raise StylesheetCompileError(f"Could not compile {self.source.name}") from e

    def process(self, cache_buster: str, variables: Mapping[str, str]) -> bool:
        """Make sure the stylesheet for ``cache_buster`` exists. Returns True if it was (re)built."""
        if self.is_cached(cache_buster):
            return False
        try:
            css = self.compile(variables)
        except StylesheetCompileError:
            logger.exception("SCSS compilation failed for cache buster %s", cache_buster)
            raise
        folder = self.app_data.get_or_create_folder(cache_buster)
        folder.new_file(COMPILED_NAME).put_content(css.encode("utf-8"))
        logger.info("Compiled %s for cache buster %s", COMPILED_NAME, cache_buster)
        return True
