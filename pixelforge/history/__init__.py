"""Undo/redo command engine."""

from .command import Command, CommandHistory, InversePairCommand, SnapshotCommand
from .commands import (
    AssetDeleteCommand,
    AssetPatchCommand,
    CelWriteCommand,
    FrameCommand,
    LayerCommand,
    PaletteCommand,
    RegistryEntryCommand,
    RenameCommand,
    ResizeCommand,
    ShapeCommand,
    TagCommand,
)

__all__ = [
    'Command',
    'CommandHistory',
    'SnapshotCommand',
    'InversePairCommand',
    'AssetPatchCommand',
    'LayerCommand',
    'FrameCommand',
    'TagCommand',
    'ShapeCommand',
    'PaletteCommand',
    'ResizeCommand',
    'CelWriteCommand',
    'RegistryEntryCommand',
    'AssetDeleteCommand',
    'RenameCommand',
]
