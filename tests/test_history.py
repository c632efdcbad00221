"""
Tests for the command engine.

Tests cover:
- CommandHistory stack behaviour, depth limit and empty-stack errors
- Snapshot commands (capture before, replay after, restore before)
- Concrete asset, palette and registry commands

Run with: pytest tests/test_history.py -v
"""

import pytest

from helpers import gradient_cel, make_asset
from pixelforge.cels import ImageCel
from pixelforge.exceptions import EmptyStackError, RegistryEntryNotFoundError
from pixelforge.history import (
    AssetDeleteCommand,
    CelWriteCommand,
    Command,
    CommandHistory,
    FrameCommand,
    InversePairCommand,
    LayerCommand,
    PaletteCommand,
    RegistryEntryCommand,
    RenameCommand,
    ResizeCommand,
    ShapeCommand,
    TagCommand,
)


class RecordingCommand(Command):
    """Appends to a shared log on execute/undo."""

    def __init__(self, name, log, fail=False):
        self.name = name
        self.log = log
        self.fail = fail

    def execute(self):
        if self.fail:
            raise RuntimeError('boom')
        self.log.append(('do', self.name))

    def undo(self):
        self.log.append(('undo', self.name))


@pytest.fixture
def history():
    return CommandHistory()


class TestCommandHistory:
    """Tests for undo/redo stacks."""

    def test_push_executes(self, history):
        log = []
        history.push(RecordingCommand('a', log))
        assert log == [('do', 'a')]
        assert (history.undo_depth, history.redo_depth) == (1, 0)

    def test_undo_redo_order(self, history):
        log = []
        history.push(RecordingCommand('a', log))
        history.push(RecordingCommand('b', log))
        history.undo()
        history.undo()
        history.redo()
        assert log[2:] == [('undo', 'b'), ('undo', 'a'), ('do', 'a')]
        assert (history.undo_depth, history.redo_depth) == (1, 1)

    def test_push_clears_redo(self, history):
        log = []
        history.push(RecordingCommand('a', log))
        history.undo()
        history.push(RecordingCommand('b', log))
        assert history.redo_depth == 0

    def test_empty_stacks_raise(self, history):
        with pytest.raises(EmptyStackError, match='Nothing to undo'):
            history.undo()
        with pytest.raises(EmptyStackError, match='Nothing to redo'):
            history.redo()

    def test_depth_limit_evicts_oldest(self):
        log = []
        history = CommandHistory(max_depth=3)
        for name in 'abcde':
            history.push(RecordingCommand(name, log))
        assert history.undo_depth == 3
        for _ in range(3):
            history.undo()
        with pytest.raises(EmptyStackError):
            history.undo()
        assert [entry for entry in log if entry[0] == 'undo'] == [('undo', 'e'), ('undo', 'd'), ('undo', 'c')]

    def test_default_depth_from_settings(self, history):
        assert history.max_depth == 100

    def test_failed_command_not_recorded(self, history):
        with pytest.raises(RuntimeError):
            history.push(RecordingCommand('bad', [], fail=True))
        assert history.undo_depth == 0

    def test_clear(self, history):
        history.push(RecordingCommand('a', []))
        history.undo()
        history.clear()
        assert (history.undo_depth, history.redo_depth) == (0, 0)

    def test_inverse_pair(self, history):
        values = []
        history.push(InversePairCommand(lambda: values.append(1), lambda: values.pop()))
        assert values == [1]
        history.undo()
        assert values == []


class TestSnapshotCommands:
    """Tests for snapshot-based asset commands."""

    def test_redo_replays_captured_state(self, history):
        """The action runs once; redo restores the captured result."""
        asset = make_asset()
        calls = []

        def action():
            calls.append(1)
            asset.add_layer('Extra')

        history.push(LayerCommand(asset, action))
        history.undo()
        history.redo()
        assert len(calls) == 1
        assert [layer.name for layer in asset.layers] == ['Layer 1', 'Extra']

    def test_layer_removal_undo_restores_cels_and_tags(self, history):
        asset = make_asset()
        asset.set_cel(1, 0, gradient_cel())
        asset.add_tag({'type': 'layer', 'name': 'base', 'layers': [1]})
        before = asset.to_dict()

        history.push(LayerCommand(asset, lambda: asset.remove_layer(1)))
        assert asset.layers == []
        history.undo()
        assert asset.to_dict() == before

    def test_frame_command(self, history):
        asset = make_asset(frames=2)
        asset.set_cel(1, 1, ImageCel(data=[[3]]))
        before = asset.to_dict()
        history.push(FrameCommand(asset, lambda: asset.remove_frame(0)))
        assert asset.get_raw_cel(1, 0).data == [[3]]
        history.undo()
        assert asset.to_dict() == before

    def test_tag_command(self, history):
        asset = make_asset()
        history.push(TagCommand(asset, lambda: asset.add_tag({'type': 'frame', 'name': 'idle', 'start': 0, 'end': 0})))
        history.undo()
        assert asset.tags == []

    def test_resize_shrink_is_reversible(self, history):
        """Pixels discarded by a shrink come back on undo."""
        asset = make_asset()
        asset.set_cel(1, 0, gradient_cel())
        before = asset.to_dict()

        history.push(ResizeCommand(asset, lambda: asset.resize(3, 2, anchor='center')))
        assert (asset.width, asset.height) == (3, 2)
        history.undo()
        assert asset.to_dict() == before
        history.redo()
        assert (asset.width, asset.height) == (3, 2)

    def test_cel_write_undo_removes_new_cel(self, history):
        asset = make_asset()
        history.push(CelWriteCommand(asset, 1, 0, lambda: asset.set_cel(1, 0, ImageCel(data=[[1]]))))
        assert asset.get_raw_cel(1, 0) is not None
        history.undo()
        assert asset.get_raw_cel(1, 0) is None
        history.redo()
        assert asset.get_raw_cel(1, 0).data == [[1]]

    def test_cel_write_undo_restores_previous_content(self, history):
        asset = make_asset()
        asset.set_cel(1, 0, ImageCel(data=[[1]]))
        history.push(CelWriteCommand(asset, 1, 0, lambda: asset.set_cel(1, 0, ImageCel(data=[[2]]))))
        history.undo()
        assert asset.get_raw_cel(1, 0).data == [[1]]

    def test_shape_command(self, history):
        asset = make_asset()
        layer_id = asset.add_layer('Hit', 'shape')
        history.push(ShapeCommand(asset, lambda: asset.add_shape(layer_id, 0, {'type': 'rect', 'name': 'box'})))
        history.undo()
        assert asset.get_shapes(layer_id, 0) == []

    def test_palette_command(self, history):
        asset = make_asset()
        history.push(PaletteCommand(asset, lambda: asset.set_palette_color(1, (9, 9, 9, 255))))
        assert asset.palette.get(1) == (9, 9, 9, 255)
        history.undo()
        assert asset.palette.get(1) == (255, 0, 0, 255)

    def test_undo_marks_dirty(self, history):
        asset = make_asset()
        history.push(PaletteCommand(asset, lambda: asset.set_palette_color(1, (9, 9, 9, 255))))
        asset.serialize_for_save()
        history.undo()
        assert asset.is_dirty


class TestRegistryCommands:
    """Tests for commands over the project registry."""

    def test_asset_delete_undo(self, history, project):
        project.register_asset('hero', {'type': 'sprite', 'path': 'hero.json'})
        history.push(AssetDeleteCommand(project, 'hero'))
        assert not project.has_asset('hero')
        history.undo()
        assert project.get_entry('hero').path == 'hero.json'

    def test_asset_delete_requires_entry(self, project):
        with pytest.raises(RegistryEntryNotFoundError):
            AssetDeleteCommand(project, 'ghost')

    def test_registry_entry_undo_of_new_entry(self, history, project):
        history.push(RegistryEntryCommand(
            project, 'tiles', lambda: project.register_asset('tiles', {'type': 'tileset', 'path': 't.json'})
        ))
        history.undo()
        assert not project.has_asset('tiles')
        history.redo()
        assert project.has_asset('tiles')

    def test_rename(self, history, project):
        project.register_asset('hero', {'type': 'sprite', 'path': 'hero.json'})
        history.push(RenameCommand(project, 'hero', 'player'))
        assert project.has_asset('player') and not project.has_asset('hero')
        history.undo()
        assert project.has_asset('hero') and not project.has_asset('player')
