"""Exception classes for the editing engine.

The engine only signals structured conditions. Turning them into user-facing
text is left to whatever tool layer sits on top.

Hierarchy:
    PixelForgeError
    ├── AssetNotLoadedError
    ├── NoProjectLoadedError
    ├── NotFoundError
    │   ├── LayerNotFoundError
    │   ├── TagNotFoundError
    │   ├── CelNotFoundError
    │   ├── ShapeNotFoundError
    │   └── RegistryEntryNotFoundError
    ├── OutOfRangeError
    │   ├── PaletteIndexOutOfRangeError
    │   ├── ColorOutOfRangeError
    │   └── FrameOutOfRangeError
    ├── TypeMismatchError
    ├── InvalidArgumentError
    │   ├── InvalidCelKeyError
    │   └── InvalidColorError
    ├── EmptyStackError
    └── ClipboardEmptyError
"""

from typing import Any, Optional


class PixelForgeError(Exception):
    """Base exception for engine errors."""

    pass


class AssetNotLoadedError(PixelForgeError):
    """Raised when an asset is not loaded in the workspace."""

    def __init__(self, asset_name: str):
        self.asset_name = asset_name
        super().__init__(f"Asset '{asset_name}' is not loaded in the workspace")


class NoProjectLoadedError(PixelForgeError):
    """Raised when an operation needs a project and none is bound."""

    def __init__(self):
        super().__init__("No project loaded")


class NotFoundError(PixelForgeError):
    """Raised when a referenced entity does not exist."""

    pass


class LayerNotFoundError(NotFoundError):
    """Raised for a layer id that does not exist in the asset."""

    def __init__(self, layer_id: int, asset_name: str):
        self.layer_id = layer_id
        self.asset_name = asset_name
        super().__init__(f"Layer {layer_id} does not exist in asset '{asset_name}'")


class TagNotFoundError(NotFoundError):
    """Raised when no tag matches a name (and facing)."""

    def __init__(self, name: str, facing: Optional[str] = None):
        self.name = name
        self.facing = facing
        suffix = f" with facing '{facing}'" if facing else ""
        super().__init__(f"Tag '{name}'{suffix} does not exist")


class CelNotFoundError(NotFoundError):
    """Raised when a cel (or a link target) is missing."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Cel '{key}' does not exist")


class ShapeNotFoundError(NotFoundError):
    """Raised when a named shape is missing from a shape cel."""

    def __init__(self, shape_name: str, key: str):
        self.shape_name = shape_name
        self.key = key
        super().__init__(f"Shape '{shape_name}' does not exist in cel '{key}'")


class RegistryEntryNotFoundError(NotFoundError):
    """Raised when a logical asset name is not in the project registry."""

    def __init__(self, asset_name: str):
        self.asset_name = asset_name
        super().__init__(f"Asset '{asset_name}' not found in project registry")


class OutOfRangeError(PixelForgeError):
    """Raised when a numeric argument falls outside its allowed range."""

    pass


class PaletteIndexOutOfRangeError(OutOfRangeError):
    """Raised for palette indices outside 0-255."""

    def __init__(self, index: Any):
        self.index = index
        super().__init__(f"Palette index {index!r} is out of range (0-255)")


class ColorOutOfRangeError(OutOfRangeError):
    """Raised when a color channel falls outside 0-255."""

    def __init__(self, color: Any):
        self.color = color
        super().__init__(f"Color {color!r} has a channel outside 0-255")


class FrameOutOfRangeError(OutOfRangeError):
    """Raised for frame indices outside the asset's frame list."""

    def __init__(self, index: int, asset_name: str, frame_count: int):
        self.index = index
        self.asset_name = asset_name
        self.frame_count = frame_count
        super().__init__(
            f"Frame {index} is out of range; asset '{asset_name}' has {frame_count} frame(s)"
        )


class TypeMismatchError(PixelForgeError):
    """Raised when a payload does not match the owning layer's type."""

    def __init__(self, message: str, expected: Optional[str] = None, actual: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class InvalidArgumentError(PixelForgeError):
    """Raised for malformed arguments or structural data."""

    pass


class InvalidCelKeyError(InvalidArgumentError):
    """Raised for a cel key that does not parse back exactly."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(f"Invalid cel key {key!r}; expected '<layerId>/<frameIndex>'")


class InvalidColorError(InvalidArgumentError):
    """Raised for a color that is not a 4-tuple of integers."""

    def __init__(self, color: Any):
        self.color = color
        super().__init__(f"Invalid RGBA color {color!r}; expected [r, g, b, a]")


class EmptyStackError(PixelForgeError):
    """Raised by undo/redo when there is nothing to apply."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Nothing to {operation}")


class ClipboardEmptyError(PixelForgeError):
    """Raised when pasting with an empty clipboard."""

    def __init__(self):
        super().__init__("Clipboard is empty")
