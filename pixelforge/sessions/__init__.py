"""Editing session: loaded assets, selection, clipboard and shared history."""

from .models import ClipboardData, SelectionMask
from .workspace import Workspace, get_workspace, workspace

__all__ = [
    'ClipboardData',
    'SelectionMask',
    'Workspace',
    'get_workspace',
    'workspace',
]
