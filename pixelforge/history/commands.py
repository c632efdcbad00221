"""Concrete commands for asset, palette and registry mutations."""

from typing import Any, ClassVar, Optional

from pixelforge.asset import Asset
from pixelforge.cels import pack_cel_key
from pixelforge.project import Project

from .command import Action, InversePairCommand, SnapshotCommand


class AssetPatchCommand(SnapshotCommand):
    """
    Snapshot of selected top-level asset fields around an action.

    Subclasses pin ``FIELDS`` to what their kind of mutation can touch;
    instances may also pass an explicit field list.
    """

    FIELDS: ClassVar[tuple[str, ...]] = ()
    label = 'asset patch'

    def __init__(self, asset: Asset, action: Action, fields: Optional[tuple[str, ...]] = None):
        self._asset = asset
        self._fields = tuple(fields) if fields is not None else self.FIELDS
        super().__init__(action)

    @property
    def asset_name(self) -> str:
        return self._asset.name

    def _capture(self) -> dict[str, Any]:
        return self._asset.snapshot_fields(self._fields)

    def _restore(self, state: dict[str, Any]) -> None:
        self._asset._restore_fields(state)


class LayerCommand(AssetPatchCommand):
    """Layer add/remove/reorder/properties. Cascades reach tags and cels."""

    FIELDS = ('layers', 'tags', 'cels')
    label = 'layer'


class FrameCommand(AssetPatchCommand):
    """Frame add/remove/duration. Shifts reach tags and cels."""

    FIELDS = ('frames', 'tags', 'cels')
    label = 'frame'


class TagCommand(AssetPatchCommand):
    FIELDS = ('tags',)
    label = 'tag'


class ShapeCommand(AssetPatchCommand):
    """Shape edits; a linked cel may redirect the write, so all cels are kept."""

    FIELDS = ('cels',)
    label = 'shape'


class PaletteCommand(AssetPatchCommand):
    FIELDS = ('palette',)
    label = 'palette'


class ResizeCommand(AssetPatchCommand):
    """
    Canvas resize. Captures the whole document structure so a shrink that
    discards pixels is fully reversible.
    """

    FIELDS = tuple(sorted(Asset.RESTORABLE_FIELDS))
    label = 'resize'


class CelWriteCommand(SnapshotCommand):
    """Snapshot of one raw cel (or its absence) around an action."""

    label = 'cel write'

    def __init__(self, asset: Asset, layer_id: int, frame_index: int, action: Action):
        self._asset = asset
        self._key = pack_cel_key(layer_id, frame_index)
        self._layer_id = layer_id
        self._frame_index = frame_index
        super().__init__(action)

    @property
    def asset_name(self) -> str:
        return self._asset.name

    def _capture(self) -> Optional[dict[str, Any]]:
        cel = self._asset.get_raw_cel(self._layer_id, self._frame_index)
        return cel.to_dict() if cel is not None else None

    def _restore(self, state: Optional[dict[str, Any]]) -> None:
        self._asset._restore_cel(self._key, state)


class RegistryEntryCommand(SnapshotCommand):
    """Snapshot of one project registry entry (or its absence) around an action."""

    label = 'registry entry'

    def __init__(self, project: Project, asset_name: str, action: Action):
        self._project = project
        self._asset_name = asset_name
        super().__init__(action)

    def _capture(self) -> Optional[dict[str, Any]]:
        if not self._project.has_asset(self._asset_name):
            return None
        return self._project.get_entry(self._asset_name).to_dict()

    def _restore(self, state: Optional[dict[str, Any]]) -> None:
        if state is None:
            if self._project.has_asset(self._asset_name):
                self._project.remove_asset(self._asset_name)
        else:
            self._project.register_asset(self._asset_name, state)


class AssetDeleteCommand(RegistryEntryCommand):
    """Removal of a registry entry; the entry must exist when built."""

    label = 'asset delete'

    def __init__(self, project: Project, asset_name: str, action: Optional[Action] = None):
        # Fails early with RegistryEntryNotFoundError
        project.get_entry(asset_name)
        super().__init__(project, asset_name, action or (lambda: project.remove_asset(asset_name)))


class RenameCommand(InversePairCommand):
    """Registry key rename, undone by renaming back."""

    label = 'rename'

    def __init__(
        self,
        project: Project,
        old_name: str,
        new_name: str,
        action: Optional[Action] = None,
        inverse: Optional[Action] = None,
    ):
        project.get_entry(old_name)
        self.old_name = old_name
        self.new_name = new_name
        super().__init__(
            action or (lambda: project.rename_asset(old_name, new_name)),
            inverse or (lambda: project.rename_asset(new_name, old_name)),
        )
