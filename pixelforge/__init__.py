"""
PixelForge - In-memory editing engine for indexed pixel-art documents
"""

from .asset import Asset
from .cels import (
    CelKey,
    ImageCel,
    LinkedCel,
    ShapeCel,
    TilemapCel,
    cel_from_dict,
    pack_cel_key,
    parse_cel_key,
)
from .colors import is_valid_color, is_valid_palette_index
from .config import Settings, settings
from .exceptions import PixelForgeError
from .history import Command, CommandHistory
from .layers import Frame, LayerType
from .palette import Palette
from .project import AssetRegistryEntry, Project
from .sessions import Workspace, get_workspace, workspace
from .shapes import PolygonShape, RectShape
from .tags import FrameTag, LayerTag

__version__ = "0.1.0"

__all__ = [
    # Document
    "Asset",
    "Palette",
    "Frame",
    "LayerType",
    # Cels
    "CelKey",
    "ImageCel",
    "TilemapCel",
    "ShapeCel",
    "LinkedCel",
    "cel_from_dict",
    "pack_cel_key",
    "parse_cel_key",
    # Shapes & tags
    "RectShape",
    "PolygonShape",
    "FrameTag",
    "LayerTag",
    # Guards
    "is_valid_color",
    "is_valid_palette_index",
    # Project & session
    "AssetRegistryEntry",
    "Project",
    "Workspace",
    "get_workspace",
    "workspace",
    # History
    "Command",
    "CommandHistory",
    # Configuration & errors
    "Settings",
    "settings",
    "PixelForgeError",
]
