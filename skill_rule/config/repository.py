import json
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from skill_rule.config.models import (
    CategoryConfig,
    ProjectConfig,
    RegistryConfig,
)
from skill_rule.constants import CONFIG_FILENAME
from skill_rule.errors import (
    InvalidConfigSchemaError,
    InvalidJsonFormatError,
    MissingConfigFileError,
)
from skill_rule.utils import read_json, write_json

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.json"


def _schema_error_message(error: Any) -> str:
    path = ".".join([str(part) for part in error.path])
    return f"{error.message} at {path}" if path else str(error.message)


def load_schema() -> dict[str, Any]:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def validate_project_config(
    payload: Any, config_path: Path, validator: Draft202012Validator
) -> None:
    if not isinstance(payload, dict):
        raise InvalidConfigSchemaError(config_path, "must be a JSON object")
    error = next(iter(validator.iter_errors(payload)), None)
    if error is not None:
        raise InvalidConfigSchemaError(config_path, _schema_error_message(error))


class ConfigRepository:
    def __init__(self, root: Path | None = None) -> None:
        self._root = root or Path.cwd()
        self._validator = Draft202012Validator(load_schema())

    @property
    def root(self) -> Path:
        return self._root

    @property
    def config_path(self) -> Path:
        return self._root / CONFIG_FILENAME

    def exists(self) -> bool:
        return self.config_path.is_file()

    def load(self) -> ProjectConfig:
        if not self.exists():
            raise MissingConfigFileError(self.config_path)
        try:
            payload = read_json(self.config_path)
        except ValueError as exc:
            raise InvalidJsonFormatError(self.config_path, str(exc)) from exc
        validate_project_config(payload, self.config_path, self._validator)
        return ProjectConfig.from_dict(payload)

    def save(self, config: ProjectConfig) -> None:
        payload = config.as_dict()
        validate_project_config(payload, self.config_path, self._validator)
        write_json(self.config_path, payload)

    def create(
        self,
        agents: list[str],
        categories: dict[str, CategoryConfig],
        registry_url: str | None = None,
    ) -> ProjectConfig:
        registry = RegistryConfig()
        if registry_url:
            registry.url = registry_url
        config = ProjectConfig(
            registry=registry, agents=list(agents), categories=dict(categories)
        )
        self.save(config)
        return config
