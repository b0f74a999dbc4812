"""YAML-based store declaration loader.

SchemaLoader reads a store declaration (default policy, per-field
restrictions and seeded fields) and validates it into a
:class:`StoreConfig`. ``StoreConfig.build_store()`` returns a ready store.

Schema
------
::

    version: "1.0"
    default_policy: rw
    admin: false
    restrictions:
      age: r
      password: w
      secret: none
    fields:
      age: 30
      profile:
        city: Oslo

Example
-------
::

    loader = SchemaLoader()
    config = loader.load("/path/to/store.yaml")
    store = config.build_store()
    store.read("age")  # 30
"""
from __future__ import annotations

import copy
import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from aumos_permission_store.permissions.permission import Permission
from aumos_permission_store.permissions.resolver import PATH_SEPARATOR, StoreSchema
from aumos_permission_store.store.container import AdminStore, Store

logger = logging.getLogger(__name__)

_SUPPORTED_VERSIONS: frozenset[str] = frozenset(["1.0", "1"])


class SchemaConfigError(ValueError):
    """Raised when a store declaration is malformed or invalid.

    Attributes
    ----------
    config_path:
        The path to the config file that caused the error, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")


class StoreConfig(BaseModel):
    """Validated store declaration."""

    model_config = {"extra": "allow"}

    version: str = Field(default="1.0")
    default_policy: Permission = Field(default=Permission.READ_WRITE)
    admin: bool = Field(default=False)
    restrictions: dict[str, Permission] = Field(default_factory=dict)
    fields: dict[str, object] = Field(default_factory=dict)

    @field_validator("version", mode="before")
    @classmethod
    def validate_version(cls, value: object) -> str:
        version = str(value)
        if version not in _SUPPORTED_VERSIONS:
            raise ValueError(
                f"Unsupported config version {version!r}. "
                f"Supported: {sorted(_SUPPORTED_VERSIONS)}."
            )
        return version

    @field_validator("default_policy", mode="before")
    @classmethod
    def validate_default_policy(cls, value: object) -> Permission:
        return Permission.parse(value)  # type: ignore[arg-type]

    @field_validator("restrictions", mode="before")
    @classmethod
    def validate_restrictions(cls, value: object) -> dict[str, Permission]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError("'restrictions' must be a mapping of field name to permission")
        parsed: dict[str, Permission] = {}
        for name, permission in value.items():
            name = str(name)
            if not name or PATH_SEPARATOR in name:
                raise ValueError(f"Invalid field name {name!r} in 'restrictions'")
            parsed[name] = Permission.parse(permission)
        return parsed

    @field_validator("fields", mode="before")
    @classmethod
    def validate_fields(cls, value: object) -> dict[str, object]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError("'fields' must be a mapping")
        parsed: dict[str, object] = {}
        for name, field_value in value.items():
            name = str(name)
            if not name or PATH_SEPARATOR in name:
                raise ValueError(f"Invalid field name {name!r} in 'fields'")
            parsed[name] = field_value
        return parsed

    def build_schema(self) -> StoreSchema:
        return StoreSchema(self.restrictions)

    def build_store(self) -> Store:
        """Return a new store seeded with :attr:`fields`."""
        store_cls = AdminStore if self.admin else Store
        return store_cls(
            default_policy=self.default_policy,
            schema=self.build_schema(),
            initial=copy.deepcopy(self.fields),
        )


class SchemaLoader:
    """Loads store declarations from YAML files, strings or dicts.

    Parameters
    ----------
    strict:
        When ``True``, unknown top-level keys are treated as an error.
        Default ``False`` (unknown keys are ignored).
    """

    _KNOWN_TOP_KEYS: frozenset[str] = frozenset(
        ["version", "default_policy", "admin", "restrictions", "fields", "description"]
    )

    def __init__(self, strict: bool = False) -> None:
        self._strict = strict

    def load(self, config_path: str | Path) -> StoreConfig:
        """Load a store declaration from a YAML file on disk.

        Raises
        ------
        FileNotFoundError
            If the config file does not exist.
        SchemaConfigError
            If the file cannot be parsed or is invalid.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Store config not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise SchemaConfigError(
                f"Failed to parse YAML: {exc}", str(config_path)
            ) from exc
        return self._build_config(raw, config_path=str(config_path))

    def load_from_dict(
        self,
        config: dict[str, object],
        config_path: str | None = None,
    ) -> StoreConfig:
        """Validate an already-parsed declaration."""
        return self._build_config(config, config_path=config_path)

    def load_from_yaml_string(
        self,
        yaml_string: str,
        config_path: str | None = None,
    ) -> StoreConfig:
        """Load a store declaration from a YAML string."""
        try:
            raw = yaml.safe_load(yaml_string) or {}
        except yaml.YAMLError as exc:
            raise SchemaConfigError(
                f"Failed to parse YAML string: {exc}", config_path
            ) from exc
        return self._build_config(raw, config_path=config_path)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_config(
        self,
        raw: object,
        config_path: str | None = None,
    ) -> StoreConfig:
        if not isinstance(raw, dict):
            raise SchemaConfigError(
                "Store config must be a YAML mapping (dict).", config_path
            )

        if self._strict:
            unknown_keys = set(raw.keys()) - self._KNOWN_TOP_KEYS
            if unknown_keys:
                raise SchemaConfigError(
                    f"Unknown top-level keys: {sorted(unknown_keys)}. "
                    f"Known keys: {sorted(self._KNOWN_TOP_KEYS)}.",
                    config_path,
                )

        try:
            config = StoreConfig.model_validate(raw)
        except ValidationError as exc:
            raise SchemaConfigError(str(exc), config_path) from exc

        logger.info(
            "Loaded store config from %s (%d restrictions, %d fields, default_policy=%s)",
            config_path or "<dict>",
            len(config.restrictions),
            len(config.fields),
            config.default_policy.value,
        )
        return config
