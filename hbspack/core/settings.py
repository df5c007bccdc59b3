from __future__ import annotations

import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_NAMED_LINEFEEDS = {"lf": "\n", "crlf": "\r\n", "cr": "\r"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="HBSPACK_", case_sensitive=False)

    node_binary: str = "node"
    handlebars_module: str = "handlebars"
    linefeed: str = os.linesep
    file_mode: int = 0o644
    compiler_timeout: float | None = None

    @field_validator("linefeed")
    @classmethod
    def _parse_linefeed(cls, value: str) -> str:
        """Accept ``lf``/``crlf``/``cr`` or escaped ``\\r``/``\\n`` sequences."""
        named = _NAMED_LINEFEEDS.get(value.strip().lower())
        if named is not None:
            return named
        value = value.replace("\\r", "\r").replace("\\n", "\n")
        if not value or value.strip("\r\n"):
            raise ValueError("linefeed must be lf, crlf, cr or consist of CR/LF")
        return value
