"""
Project - Asset registry for a directory of pixel-art documents.

The registry maps logical asset names to where their documents live. Reading
and writing the registry file itself is left to the caller; this module only
holds and edits its contents.

Serialization format:
{
    "pixelmcp_version": "1.0",
    "name": "my-game",
    "created": "2026-01-01T00:00:00+00:00",
    "conventions": {...},
    "defaults": {"palette": "endesga-32"},
    "assets": {
        "hero": {"type": "sprite", "path": "sprites/hero.json"},
        "grass": {"type": "tileset", "variants": {"summer": "...", "winter": "..."}},
        "hero_red": {"type": "sprite", "path": "...", "recolor_of": "hero"}
    }
}
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pixelforge.exceptions import InvalidArgumentError, RegistryEntryNotFoundError

logger = logging.getLogger(__name__)

PROJECT_FORMAT_VERSION = '1.0'


class AssetRegistryEntry(BaseModel):
    """Where one logical asset lives: a single path or named variants."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra='allow',
    )

    type: str
    path: Optional[str] = None
    variants: Optional[dict[str, str]] = None
    recolor_of: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode='json', exclude_none=True)


class ProjectConfig(BaseModel):
    """Registry file contents."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra='allow',
    )

    pixelmcp_version: str = PROJECT_FORMAT_VERSION
    name: str
    created: Optional[str] = None
    conventions: Optional[dict[str, Any]] = None
    defaults: Optional[dict[str, Any]] = None
    assets: dict[str, AssetRegistryEntry] = Field(default_factory=dict)


def _entry(data: Union[AssetRegistryEntry, dict[str, Any]]) -> AssetRegistryEntry:
    if isinstance(data, AssetRegistryEntry):
        return data.model_copy(deep=True)
    try:
        return AssetRegistryEntry.model_validate(data)
    except ValidationError as exc:
        raise InvalidArgumentError(f"Invalid registry entry: {exc}") from exc


class Project:
    """Stateful wrapper around a loaded registry."""

    def __init__(self, path: Union[str, Path], config: ProjectConfig):
        self._path = Path(path)
        self._config = config.model_copy(deep=True)
        self.is_dirty = False

    @classmethod
    def create(cls, path: Union[str, Path], name: str) -> 'Project':
        """New, empty registry; dirty until first saved."""
        config = ProjectConfig(
            name=name,
            created=datetime.now(timezone.utc).isoformat(),
        )
        project = cls(path, config)
        project.is_dirty = True
        logger.debug("Created project '%s' at %s", name, path)
        return project

    @classmethod
    def from_dict(cls, path: Union[str, Path], data: dict[str, Any]) -> 'Project':
        """Wrap parsed registry data loaded from ``path``."""
        try:
            config = ProjectConfig.model_validate(data)
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid project data: {exc}") from exc
        return cls(path, config)

    def to_dict(self) -> dict[str, Any]:
        return self._config.model_dump(mode='json', exclude_none=True)

    def serialize_for_save(self) -> dict[str, Any]:
        """Snapshot for writing to disk; clears the dirty flag."""
        data = self.to_dict()
        self.is_dirty = False
        return data

    @property
    def path(self) -> Path:
        return self._path

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def pixelmcp_version(self) -> str:
        return self._config.pixelmcp_version

    @property
    def created(self) -> Optional[str]:
        return self._config.created

    @property
    def defaults(self) -> Optional[dict[str, Any]]:
        return dict(self._config.defaults) if self._config.defaults is not None else None

    @property
    def conventions(self) -> Optional[dict[str, Any]]:
        return dict(self._config.conventions) if self._config.conventions is not None else None

    @property
    def assets(self) -> dict[str, AssetRegistryEntry]:
        return {name: entry.model_copy(deep=True) for name, entry in self._config.assets.items()}

    def info(self) -> dict[str, Any]:
        """Summary of the registry."""
        return {
            'path': str(self._path),
            'name': self.name,
            'pixelmcp_version': self.pixelmcp_version,
            'created': self.created,
            'conventions': self.conventions,
            'defaults': self.defaults,
            'assets': {name: entry.to_dict() for name, entry in self._config.assets.items()},
        }

    def get_entry(self, name: str) -> AssetRegistryEntry:
        """Copy of a registry entry."""
        entry = self._config.assets.get(name)
        if entry is None:
            raise RegistryEntryNotFoundError(name)
        return entry.model_copy(deep=True)

    def has_asset(self, name: str) -> bool:
        return name in self._config.assets

    def register_asset(self, name: str, entry: Union[AssetRegistryEntry, dict[str, Any]]) -> None:
        """Add or replace a registry entry."""
        self._config.assets[name] = _entry(entry)
        self.is_dirty = True

    def remove_asset(self, name: str) -> AssetRegistryEntry:
        """
        Drop a registry entry. Files on disk are left alone.

        Returns:
            The removed entry
        """
        entry = self._config.assets.pop(name, None)
        if entry is None:
            raise RegistryEntryNotFoundError(name)
        self.is_dirty = True
        return entry

    def rename_asset(self, old_name: str, new_name: str) -> None:
        """Change a registry key; the entry's paths are not touched."""
        if old_name not in self._config.assets:
            raise RegistryEntryNotFoundError(old_name)
        if old_name == new_name:
            return
        if new_name in self._config.assets:
            raise InvalidArgumentError(f"Asset '{new_name}' already exists in the registry")
        self._config.assets[new_name] = self._config.assets.pop(old_name)
        self.is_dirty = True

    def resolve_asset_path(self, name: str, variant: Optional[str] = None) -> Path:
        """
        Absolute file path for a registered asset.

        Args:
            name: Logical asset name
            variant: Variant key; defaults to the first variant for
                variant-based entries and must be omitted otherwise

        Returns:
            Path resolved against the registry file's directory
        """
        entry = self._config.assets.get(name)
        if entry is None:
            raise RegistryEntryNotFoundError(name)

        if entry.variants is not None:
            if variant is not None:
                if variant not in entry.variants:
                    raise InvalidArgumentError(f"Variant '{variant}' not found for asset '{name}'")
                relative = entry.variants[variant]
            else:
                if not entry.variants:
                    raise InvalidArgumentError(f"Asset '{name}' has an empty variants map")
                relative = next(iter(entry.variants.values()))
        else:
            if variant is not None:
                raise InvalidArgumentError(f"Asset '{name}' does not use variants")
            if entry.path is None:
                raise InvalidArgumentError(f"Asset '{name}' is missing path configuration")
            relative = entry.path

        return (self._path.parent / relative).resolve()

    def palette_source(self) -> Optional[tuple[str, str]]:
        """
        Classify the default palette setting.

        Returns:
            ('file', value) for paths, ('slug', value) for named palettes,
            or None when no default palette is configured
        """
        palette = (self._config.defaults or {}).get('palette')
        if not palette:
            return None
        if '/' in palette or palette.endswith('.json'):
            return 'file', palette
        return 'slug', palette
