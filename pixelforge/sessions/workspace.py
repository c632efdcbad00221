"""
Workspace - The live editing session.

Holds the bound project, the loaded assets, the clipboard, the active
selection, and one command history shared by every loaded asset, so undo and
redo follow the global order of operations rather than per-asset order.

A ``Workspace`` is an ordinary object; tests and embedders construct their
own. ``workspace`` is the default instance for a single-process server.
"""

import logging
from typing import Any, Callable, Optional, Union

from pixelforge.asset import Asset
from pixelforge.drawing import CelCanvas, import_rgba
from pixelforge.exceptions import (
    AssetNotLoadedError,
    ClipboardEmptyError,
    InvalidArgumentError,
    NoProjectLoadedError,
)
from pixelforge.history import AssetPatchCommand, CelWriteCommand, Command, CommandHistory
from pixelforge.project import Project

from .models import ClipboardData, SelectionMask

logger = logging.getLogger(__name__)


class Workspace:
    """In-memory editing session."""

    def __init__(self, history_depth: Optional[int] = None):
        self._history_depth = history_depth
        self.project: Optional[Project] = None
        self._assets: dict[str, Asset] = {}
        self._variants: dict[str, Optional[str]] = {}
        self.clipboard: Optional[ClipboardData] = None
        self.selection: Optional[SelectionMask] = None
        self._history = CommandHistory(history_depth)

    def reset(self) -> None:
        """Drop every piece of session state."""
        self.project = None
        self._assets.clear()
        self._variants.clear()
        self.clipboard = None
        self.selection = None
        self._history = CommandHistory(self._history_depth)
        logger.debug("Workspace reset")

    # ------------------------------------------------------------------
    # Project
    # ------------------------------------------------------------------

    def set_project(self, project: Optional[Project]) -> None:
        self.project = project
        if project is not None:
            logger.info("Workspace bound to project '%s'", project.name)

    def require_project(self) -> Project:
        if self.project is None:
            raise NoProjectLoadedError()
        return self.project

    # ------------------------------------------------------------------
    # Asset lifecycle
    # ------------------------------------------------------------------

    @property
    def loaded_assets(self) -> list[str]:
        return list(self._assets)

    def is_loaded(self, name: str) -> bool:
        return name in self._assets

    def get_asset(self, name: str) -> Asset:
        asset = self._assets.get(name)
        if asset is None:
            raise AssetNotLoadedError(name)
        return asset

    def load_asset(self, name: str, data: Union[Asset, dict[str, Any]],
                   variant: Optional[str] = None) -> Asset:
        """
        Add a document to the session, replacing any asset loaded under the
        same name.

        Args:
            name: Logical asset name the session tracks it under
            data: Serialized asset or an already built Asset
            variant: Variant key the document was resolved from, if any

        Returns:
            The loaded asset
        """
        asset = data if isinstance(data, Asset) else Asset.from_dict(data)
        self._assets[name] = asset
        self._variants[name] = variant
        logger.debug("Loaded asset '%s'%s", name, f" (variant {variant})" if variant else "")
        return asset

    def unload_asset(self, name: str) -> bool:
        """
        Remove a document from the session.

        A selection on the removed asset is cleared; selections elsewhere
        stay. History entries are kept and still hold the unloaded Asset
        object: undoing them after the same name is loaded again changes
        that detached object, never the newly loaded one.

        Returns:
            True if the removed document had unsaved changes
        """
        asset = self.get_asset(name)
        del self._assets[name]
        self._variants.pop(name, None)
        if self.selection is not None and self.selection.asset_name == name:
            self.selection = None
        if asset.is_dirty:
            logger.warning("Unloaded asset '%s' with unsaved changes", name)
        return asset.is_dirty

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, name: str) -> dict[str, Any]:
        """Serialize a loaded asset for writing and clear its dirty flag."""
        return self.get_asset(name).serialize_for_save()

    def save_all(self) -> list[tuple[str, dict[str, Any]]]:
        """Serialize every dirty asset; returns (name, data) pairs."""
        return [
            (name, asset.serialize_for_save())
            for name, asset in self._assets.items()
            if asset.is_dirty
        ]

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    @property
    def history(self) -> CommandHistory:
        return self._history

    @property
    def undo_depth(self) -> int:
        return self._history.undo_depth

    @property
    def redo_depth(self) -> int:
        return self._history.redo_depth

    def push_command(self, command: Command) -> None:
        """Execute a command and record it in the shared history."""
        self._history.push(command)

    def undo(self) -> Command:
        return self._history.undo()

    def redo(self) -> Command:
        return self._history.redo()

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw(self, asset_name: str, layer_id: int, frame_index: int,
             operation: Callable[[CelCanvas], Any]) -> Any:
        """
        Run drawing operations on one cel as a single undoable step.

        The active selection masks the writes when it targets the same cel.

        Args:
            asset_name: Loaded asset
            layer_id: Image layer
            frame_index: Frame
            operation: Called with the canvas; its return value is passed back

        Returns:
            Whatever ``operation`` returned
        """
        asset = self.get_asset(asset_name)
        selection = self._selection_for(asset_name, layer_id, frame_index)
        outcome: dict[str, Any] = {}

        def action() -> None:
            canvas = CelCanvas(asset, layer_id, frame_index, selection)
            outcome['result'] = operation(canvas)
            canvas.commit()

        self.push_command(CelWriteCommand(asset, layer_id, frame_index, action))
        return outcome.get('result')

    def import_image(self, asset_name: str, layer_id: int, frame_index: int,
                     pixels: Any, width: int, height: int, **options: Any):
        """Quantize RGBA pixels into an asset as one undoable step."""
        asset = self.get_asset(asset_name)
        outcome: dict[str, Any] = {}

        def action() -> None:
            outcome['result'] = import_rgba(asset, layer_id, frame_index, pixels, width, height, **options)

        self.push_command(AssetPatchCommand(asset, action, fields=('palette', 'cels')))
        return outcome['result']

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_rect(self, asset_name: str, layer_id: int, frame_index: int,
                    x: int, y: int, width: int, height: int) -> Optional[SelectionMask]:
        """
        Select a rectangle clipped to the canvas. A rectangle with no pixels
        on the canvas clears the selection.
        """
        asset = self.get_asset(asset_name)
        left = max(0, x)
        top = max(0, y)
        right = min(asset.width, x + width)
        bottom = min(asset.height, y + height)
        if width <= 0 or height <= 0 or right <= left or bottom <= top:
            self.selection = None
        else:
            self.selection = SelectionMask.rect(
                asset_name, layer_id, frame_index, left, top, right - left, bottom - top
            )
        return self.selection

    def select_all(self, asset_name: str, layer_id: int, frame_index: int) -> SelectionMask:
        asset = self.get_asset(asset_name)
        self.selection = SelectionMask.rect(
            asset_name, layer_id, frame_index, 0, 0, asset.width, asset.height
        )
        return self.selection

    def select_invert(self, asset_name: str, layer_id: int, frame_index: int) -> SelectionMask:
        """Select every canvas pixel not in the current selection of this cel."""
        asset = self.get_asset(asset_name)
        current = self._selection_for(asset_name, layer_id, frame_index)
        mask = [
            [current is None or not current.contains(px, py) for px in range(asset.width)]
            for py in range(asset.height)
        ]
        self.selection = SelectionMask(
            asset_name, layer_id, frame_index, 0, 0, asset.width, asset.height, mask
        )
        return self.selection

    def select_by_color(self, asset_name: str, layer_id: int, frame_index: int,
                        color: int) -> Optional[SelectionMask]:
        """Select every pixel holding a palette index; none found clears the selection."""
        asset = self.get_asset(asset_name)
        canvas = CelCanvas(asset, layer_id, frame_index)
        matches = (canvas.pixels == color)
        if not matches.any():
            self.selection = None
        else:
            self.selection = SelectionMask(
                asset_name, layer_id, frame_index, 0, 0, asset.width, asset.height,
                matches.tolist(),
            )
        return self.selection

    def clear_selection(self) -> None:
        self.selection = None

    # ------------------------------------------------------------------
    # Clipboard
    # ------------------------------------------------------------------

    def copy(self, asset_name: str, layer_id: int, frame_index: int) -> ClipboardData:
        """Copy the selected pixels of a cel; unselected pixels copy as 0."""
        selection = self._require_selection(asset_name, layer_id, frame_index)
        canvas = CelCanvas(self.get_asset(asset_name), layer_id, frame_index)
        data = canvas.read_region(selection.x, selection.y, selection.width, selection.height)
        for row in range(selection.height):
            for col in range(selection.width):
                if not selection.mask[row][col]:
                    data[row][col] = 0
        self.clipboard = ClipboardData(
            data=data,
            width=selection.width,
            height=selection.height,
            origin_x=selection.x,
            origin_y=selection.y,
        )
        return self.clipboard

    def cut(self, asset_name: str, layer_id: int, frame_index: int) -> ClipboardData:
        """Copy the selection, then clear the selected pixels as one undoable step."""
        clipboard = self.copy(asset_name, layer_id, frame_index)
        selection = self.selection
        self.draw(
            asset_name, layer_id, frame_index,
            lambda canvas: canvas.erase_region(selection.x, selection.y, selection.width, selection.height),
        )
        return clipboard

    def paste(self, asset_name: str, layer_id: int, frame_index: int,
              offset_x: int = 0, offset_y: int = 0) -> int:
        """
        Paste the clipboard at its copy origin plus an offset. Index 0 in the
        clipboard counts as empty and leaves the target pixel alone.

        Returns:
            Number of pixels written
        """
        if self.clipboard is None:
            raise ClipboardEmptyError()
        clip = self.clipboard
        asset = self.get_asset(asset_name)

        outcome: dict[str, int] = {}

        def action() -> None:
            canvas = CelCanvas(asset, layer_id, frame_index)
            outcome['written'] = canvas.write_pixels(
                clip.data, clip.origin_x + offset_x, clip.origin_y + offset_y, skip_transparent=True
            )
            canvas.commit()

        self.push_command(CelWriteCommand(asset, layer_id, frame_index, action))
        return outcome['written']

    # ------------------------------------------------------------------
    # Info
    # ------------------------------------------------------------------

    def info(self) -> dict[str, Any]:
        """Summary of the session state."""
        assets = []
        for name, asset in self._assets.items():
            entry: dict[str, Any] = {'name': name, 'is_dirty': asset.is_dirty}
            variant = self._variants.get(name)
            if variant is not None:
                entry['variant'] = variant
            assets.append(entry)
        return {
            'project': (
                {'name': self.project.name, 'path': str(self.project.path)}
                if self.project is not None else None
            ),
            'loaded_assets': assets,
            'undo_depth': self.undo_depth,
            'redo_depth': self.redo_depth,
            'selection': self.selection.to_summary() if self.selection is not None else None,
            'clipboard': self.clipboard.to_summary() if self.clipboard is not None else None,
        }

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _selection_for(self, asset_name: str, layer_id: int, frame_index: int) -> Optional[SelectionMask]:
        if self.selection is not None and self.selection.targets(asset_name, layer_id, frame_index):
            return self.selection
        return None

    def _require_selection(self, asset_name: str, layer_id: int, frame_index: int) -> SelectionMask:
        selection = self._selection_for(asset_name, layer_id, frame_index)
        if selection is None:
            raise InvalidArgumentError(
                f"No active selection on asset '{asset_name}' layer {layer_id} frame {frame_index}"
            )
        return selection


# Default session for a single-process server
workspace = Workspace()


def get_workspace() -> Workspace:
    """Return the default session."""
    return workspace
