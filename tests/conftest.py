"""Test fixtures for PixelForge.

Every fixture builds fresh objects so tests never share session state:
- `asset`: 8x8 document with one image layer (id 1), one frame and a small palette
- `workspace`: fresh Workspace with `asset` loaded as "hero"
- `project`: empty registry located in a temporary directory
"""

import pytest

from helpers import make_asset
from pixelforge.asset import Asset
from pixelforge.project import Project
from pixelforge.sessions import Workspace


@pytest.fixture
def asset() -> Asset:
    return make_asset()


@pytest.fixture
def workspace(asset) -> Workspace:
    ws = Workspace()
    ws.load_asset('hero', asset)
    return ws


@pytest.fixture
def project(tmp_path) -> Project:
    project = Project.create(tmp_path / 'pixelmcp.json', 'test-game')
    project.serialize_for_save()
    return project
