"""Compiler settings, loaded from qwxml.yaml and the environment."""

from __future__ import annotations

import importlib
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from qwxml.exceptions import ConfigError

if TYPE_CHECKING:
    from qwxml.parser.registry import CompilerRegistry

log = logging.getLogger(__name__)

CONFIG_FILENAME = "qwxml.yaml"

ENV_BASE_URL = "QWXML_BASE_URL"
ENV_FETCH_TIMEOUT = "QWXML_FETCH_TIMEOUT"


class CompilerSettings(BaseModel):
    """Settings for a compile pass.

    Example qwxml.yaml:
        base_url: https://example.com/assets/
        fetch_timeout: 10
        plugins:
          - myapp.markup
        symbols:
          app.Delegate: myapp.delegates:AppDelegate
    """

    base_url: str | None = Field(
        default=None, description="Base URL overriding the document's own"
    )
    fetch_timeout: float = Field(
        default=30.0, gt=0, description="Timeout for resource fetches in seconds"
    )
    follow_redirects: bool = True
    max_redirects: int = Field(default=5, ge=0)
    plugins: list[str] = Field(
        default_factory=list,
        description="Modules imported to register extra tags and types",
    )
    symbols: dict[str, str] = Field(
        default_factory=dict,
        description="Symbol path -> 'module:attr' import reference",
    )

    @field_validator("symbols")
    @classmethod
    def check_symbol_refs(cls, value: dict[str, str]) -> dict[str, str]:
        for path, ref in value.items():
            if ":" not in ref:
                raise ValueError(
                    f"Symbol '{path}' must reference 'module:attr', got '{ref}'"
                )
        return value

    @classmethod
    def load(cls, path: Path) -> "CompilerSettings":
        """Load settings from a yaml file. A missing file yields defaults.

        Raises:
            ConfigError: If the file is not valid yaml or fails validation.
        """
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid yaml in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings in {path}: {e}") from e

    def with_env(self, environ: Mapping[str, str] | None = None) -> "CompilerSettings":
        """Return a copy with QWXML_* environment overrides applied."""
        environ = os.environ if environ is None else environ
        updates: dict[str, Any] = {}

        if environ.get(ENV_BASE_URL):
            updates["base_url"] = environ[ENV_BASE_URL]

        if environ.get(ENV_FETCH_TIMEOUT):
            try:
                timeout = float(environ[ENV_FETCH_TIMEOUT])
            except ValueError as e:
                raise ConfigError(
                    f"{ENV_FETCH_TIMEOUT} must be a number, got "
                    f"'{environ[ENV_FETCH_TIMEOUT]}'"
                ) from e
            if timeout <= 0:
                raise ConfigError(f"{ENV_FETCH_TIMEOUT} must be positive")
            updates["fetch_timeout"] = timeout

        return self.model_copy(update=updates)

    def apply(self, registry: CompilerRegistry) -> None:
        """Import plugin modules and define configured symbols.

        Plugins register their compilers into the default registry on import,
        like the built-ins do.

        Raises:
            ConfigError: If a plugin or symbol cannot be imported.
        """
        for plugin in self.plugins:
            try:
                importlib.import_module(plugin)
            except ImportError as e:
                raise ConfigError(f"Cannot import plugin '{plugin}': {e}") from e
            log.info("Loaded plugin %s", plugin)

        for path, ref in self.symbols.items():
            registry.namespace.define(path, _import_ref(ref))
            log.debug("Defined symbol %s -> %s", path, ref)


def _import_ref(ref: str) -> Any:
    module_name, _, attr = ref.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import '{module_name}' for symbol: {e}") from e

    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ConfigError(f"'{ref}' does not resolve: {e}") from e
    return obj


def find_config_file(start: Path | None = None) -> Path | None:
    """Find qwxml.yaml in the given directory or its parents."""
    cwd = start or Path.cwd()
    for parent in [cwd] + list(cwd.parents):
        candidate = parent / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None
