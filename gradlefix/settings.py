"""Settings loading.

Installation-wide settings are loaded in priority order (highest first):
  1. Environment variables  (GRADLEFIX_DEPENDENCY_FORMAT=named)
  2. settings.json          (~/.config/gradlefix/, or $GRADLEFIX_CONFIG_FILE)
  3. Hardcoded defaults

Each project may override them in a ``.gradlefix.json`` at its root; keys
missing there fall back to the installation-wide values.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ValidationError
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .errors import GradleFixError
from .formats import DependencyFormat, get_format
from .logging import get_logger
from .releases import RELEASE_FEED_URL

logger = get_logger(__name__)

PROJECT_SETTINGS_FILE = ".gradlefix.json"
CONFIG_FILE_ENV = "GRADLEFIX_CONFIG_FILE"


def application_config_file() -> Path:
    """Location of the installation-wide settings file."""
    override = os.environ.get(CONFIG_FILE_ENV)
    if override:
        return Path(override)
    return Path.home() / ".config" / "gradlefix" / "settings.json"


def _validate_format(value: str) -> str:
    fmt = get_format(value)
    if not fmt.generatable:
        raise ValueError(f"{fmt.human_name} format cannot be used as the preferred format")
    return fmt.name


PreferredFormat = Annotated[str, AfterValidator(_validate_format)]


class GradleFixSettings(BaseModel):
    """Per-project settings."""

    ignore_outdated_version: bool = False
    always_convert_groovy: bool = False
    dependency_format: PreferredFormat = "notation"

    @property
    def format(self) -> DependencyFormat:
        return get_format(self.dependency_format)


class ApplicationSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GRADLEFIX_", extra="ignore")

    ignore_outdated_version: bool = False
    always_convert_groovy: bool = False
    dependency_format: PreferredFormat = "notation"
    feed_url: str = RELEASE_FEED_URL
    feed_timeout: float = 30.0

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            JsonConfigSettingsSource(settings_cls, json_file=application_config_file()),
        )

    def project_defaults(self) -> GradleFixSettings:
        """Project settings as a project without its own file sees them."""
        return GradleFixSettings(
            ignore_outdated_version=self.ignore_outdated_version,
            always_convert_groovy=self.always_convert_groovy,
            dependency_format=self.dependency_format,
        )


def load_application_settings() -> ApplicationSettings:
    """Load installation-wide settings.

    Raises:
        GradleFixError: If the settings file or environment holds invalid values
    """
    try:
        return ApplicationSettings()
    except ValidationError as e:
        raise GradleFixError(f"Invalid settings: {e}") from e


def load_project_settings(project_dir: Path, application: ApplicationSettings | None = None) -> GradleFixSettings:
    """Load the settings of the project rooted at ``project_dir``.

    Raises:
        GradleFixError: If ``.gradlefix.json`` is not valid
    """
    if application is None:
        application = load_application_settings()

    values = application.project_defaults().model_dump()
    path = project_dir / PROJECT_SETTINGS_FILE
    if path.is_file():
        try:
            stored = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            raise GradleFixError(f"Invalid JSON in {path}: {e}") from e
        if not isinstance(stored, dict):
            raise GradleFixError(f"{path} must contain a JSON object")
        values.update(stored)
    else:
        logger.debug("No %s in %s, using application defaults", PROJECT_SETTINGS_FILE, project_dir)

    try:
        return GradleFixSettings.model_validate(values)
    except ValidationError as e:
        raise GradleFixError(f"Invalid project settings in {path}: {e}") from e


def save_project_settings(project_dir: Path, settings: GradleFixSettings) -> Path:
    path = project_dir / PROJECT_SETTINGS_FILE
    path.write_text(settings.model_dump_json(indent=2) + "\n")
    return path


def save_application_settings(settings: ApplicationSettings) -> Path:
    path = application_config_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(settings.model_dump_json(indent=2) + "\n")
    return path
