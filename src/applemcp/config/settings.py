"""AppleSettings — one frozen object built from flags, env and TOML.

Priority, highest first: CLI flags, ``APPLEMCP_*`` environment variables
(``__`` separates sections, e.g. ``APPLEMCP_MESSAGES__MAX_LIMIT``), the
``applemcp.toml`` file, then the defaults in :mod:`applemcp.config.models`.
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from applemcp.config.discovery import read_toml, resolve_config
from applemcp.config.models import BridgeConfig, McpConfig, MessagesConfig

# The file the next AppleSettings() call should read; set only inside from_cli().
_toml_path: ContextVar[Path | None] = ContextVar("applemcp_toml_path", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by the sections of one TOML file."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path | None) -> None:
        super().__init__(settings_cls)
        self._sections = read_toml(path) if path is not None else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._sections.get(field_name), field_name, field_name in self._sections

    def __call__(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in self._sections.items()
            if name in self.settings_cls.model_fields
        }


class AppleSettings(BaseSettings):
    """Settings shared by ``applemcp serve`` and the other commands.

    Attributes:
        config_path: The TOML file the settings were read from, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "APPLEMCP_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    bridge: BridgeConfig = Field(default_factory=BridgeConfig)
    messages: MessagesConfig = Field(default_factory=MessagesConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _toml_path.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> AppleSettings:
        """Build settings for one CLI invocation.

        *config_path* is the ``--config`` value; without it the file is
        discovered from *start* (default: cwd). *cli_flags* override
        everything else.
        """
        path = resolve_config(config_path, start)
        token = _toml_path.set(path)
        try:
            return cls(config_path=path, **cli_flags)
        finally:
            _toml_path.reset(token)
