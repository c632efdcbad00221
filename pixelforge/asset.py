"""
Asset - One editable pixel-art document.

An asset contains:
- Dimensions and perspective
- Palette (256 indexed colors)
- Layers (flat list, groups referenced through parent_id)
- Frames (animation timeline)
- Cels keyed "<layerId>/<frameIndex>"
- Tags (frame ranges and layer sets)

Every mutation goes through a method on this class. Each method validates its
preconditions before touching state, raises a structured error on violation,
and otherwise marks the asset dirty. Accessors hand out copies; the command
history snapshots rely on nothing outside this class holding live state.
"""

import logging
from typing import Any, ClassVar, Iterable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pixelforge.algorithms import reframe_grid
from pixelforge.cels import (
    Cel,
    ImageCel,
    LinkedCel,
    ShapeCel,
    cel_from_dict,
    copy_cel,
    pack_cel_key,
    parse_cel_key,
)
from pixelforge.config import settings
from pixelforge.exceptions import (
    CelNotFoundError,
    FrameOutOfRangeError,
    InvalidArgumentError,
    InvalidCelKeyError,
    LayerNotFoundError,
    ShapeNotFoundError,
    TagNotFoundError,
    TypeMismatchError,
)
from pixelforge.layers import BaseLayer, Frame, LayerGroup, ShapeLayer, get_layer_class, layer_from_dict
from pixelforge.palette import Palette
from pixelforge.shapes import Shape, shape_from_dict
from pixelforge.tags import FrameTag, LayerTag, Tag, tag_from_dict

logger = logging.getLogger(__name__)

Perspective = Literal['flat', 'top_down', 'top_down_3/4', 'isometric']
Anchor = Literal[
    'top_left', 'top_center', 'top_right',
    'center_left', 'center', 'center_right',
    'bottom_left', 'bottom_center', 'bottom_right',
]


class AssetData(BaseModel):
    """
    Structural shape of a serialized asset.

    {
        "name": "hero",
        "width": 16,
        "height": 16,
        "perspective": "flat",
        "palette": [[0, 0, 0, 0], [255, 0, 0, 255], null, ...],
        "layers": [...],
        "frames": [{"index": 0, "duration_ms": 100}],
        "cels": {"1/0": {"x": 0, "y": 0, "data": [[...]]}},
        "tags": [...],
        "tile_width": 16,       // tilesets only
        "tile_height": 16,
        "tile_count": 4
    }
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra='ignore',
    )

    name: str
    width: int = Field(ge=1)
    height: int = Field(ge=1)
    perspective: Perspective = 'flat'
    palette: list[Any] = Field(default_factory=list)
    layers: list[dict[str, Any]] = Field(default_factory=list)
    frames: list[dict[str, Any]] = Field(default_factory=list)
    cels: dict[str, dict[str, Any]] = Field(default_factory=dict)
    tags: list[dict[str, Any]] = Field(default_factory=list)

    tile_width: Optional[int] = Field(default=None, ge=1)
    tile_height: Optional[int] = Field(default=None, ge=1)
    tile_count: Optional[int] = Field(default=None, ge=0)


def _require_dimensions(width: Any, height: Any) -> None:
    for value in (width, height):
        # bool is an int subclass but never a size
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            raise InvalidArgumentError(f"Asset dimensions must be positive integers, got {width!r}x{height!r}")


def _parse_layers(items: Iterable[Any]) -> list[BaseLayer]:
    layers = [layer_from_dict(item) for item in items]
    seen: set[int] = set()
    for layer in layers:
        if layer.id in seen:
            raise InvalidArgumentError(f"Duplicate layer id {layer.id}")
        seen.add(layer.id)
    return layers


def _parse_frames(items: Iterable[Any]) -> list[Frame]:
    frames = []
    for position, item in enumerate(items):
        try:
            frame = Frame.model_validate(item)
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid frame: {exc}") from exc
        # The list position is authoritative
        frame.index = position
        frames.append(frame)
    return frames


def _parse_cels(items: dict[str, Any]) -> dict[str, Cel]:
    cels: dict[str, Cel] = {}
    for key, value in items.items():
        parsed = parse_cel_key(key)
        if parsed is None or pack_cel_key(*parsed) != key:
            raise InvalidCelKeyError(key)
        cels[key] = cel_from_dict(value)
    return cels


def _parse_tags(items: Iterable[Any]) -> list[Tag]:
    return [tag_from_dict(item) for item in items]


class Asset:
    """
    Stateful wrapper for a loaded asset document.

    Use ``Asset.scaffold()`` for a fresh document and ``Asset.from_dict()``
    to rehydrate structural data.
    """

    PERSPECTIVES: ClassVar[tuple[str, ...]] = ('flat', 'top_down', 'top_down_3/4', 'isometric')
    ANCHORS: ClassVar[tuple[str, ...]] = (
        'top_left', 'top_center', 'top_right',
        'center_left', 'center', 'center_right',
        'bottom_left', 'bottom_center', 'bottom_right',
    )

    # Top-level fields the command engine may restore wholesale
    RESTORABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {'width', 'height', 'perspective', 'palette', 'layers', 'frames', 'cels', 'tags'}
    )

    def __init__(self, name: str, width: int, height: int, perspective: str = 'flat'):
        _require_dimensions(width, height)
        if perspective not in self.PERSPECTIVES:
            raise InvalidArgumentError(f"Unknown perspective {perspective!r}")
        self._name = name
        self._width = width
        self._height = height
        self._perspective = perspective
        self._palette = Palette()
        self._layers: list[BaseLayer] = []
        self._frames: list[Frame] = []
        self._cels: dict[str, Cel] = {}
        self._tags: list[Tag] = []
        self.tile_width: Optional[int] = None
        self.tile_height: Optional[int] = None
        self.tile_count: Optional[int] = None

        # Unsaved changes; cleared only by serialize_for_save()
        self.is_dirty = False

    # ------------------------------------------------------------------
    # Construction & serialization
    # ------------------------------------------------------------------

    @classmethod
    def scaffold(
        cls,
        name: str,
        width: int,
        height: int,
        perspective: Optional[str] = None,
        layers: Optional[Iterable[tuple[str, str]]] = None,
        frame_durations: Optional[Iterable[int]] = None,
        palette: Optional[Iterable[Any]] = None,
    ) -> 'Asset':
        """
        Create a fresh document.

        Args:
            name: Logical asset name
            width: Canvas width
            height: Canvas height
            perspective: Projection; defaults to ``settings.DEFAULT_PERSPECTIVE``
            layers: (name, type) pairs; defaults to one image layer "Layer 1"
            frame_durations: One duration per frame; defaults to a single frame
            palette: Initial serialized palette

        Returns:
            New asset, marked dirty because it has never been saved
        """
        asset = cls(name, width, height, perspective or settings.DEFAULT_PERSPECTIVE)
        if palette is not None:
            asset._palette = Palette.from_list(palette)
        for layer_name, layer_type in (layers if layers is not None else [('Layer 1', 'image')]):
            asset.add_layer(layer_name, layer_type)
        durations = list(frame_durations) if frame_durations is not None else [settings.DEFAULT_FRAME_DURATION_MS]
        for duration in durations:
            asset.add_frame(duration)
        asset.is_dirty = True
        return asset

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Asset':
        """
        Rehydrate an asset from its serialized dictionary.

        Raises:
            InvalidArgumentError: For malformed structure (including cel keys
                that do not parse back exactly)
        """
        try:
            envelope = AssetData.model_validate(data)
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid asset data: {exc}") from exc

        asset = cls(envelope.name, envelope.width, envelope.height, envelope.perspective)
        asset._palette = Palette.from_list(envelope.palette)
        asset._layers = _parse_layers(envelope.layers)
        asset._frames = _parse_frames(envelope.frames)
        asset._cels = _parse_cels(envelope.cels)
        asset._tags = _parse_tags(envelope.tags)
        asset.tile_width = envelope.tile_width
        asset.tile_height = envelope.tile_height
        asset.tile_count = envelope.tile_count
        return asset

    def to_dict(self) -> dict[str, Any]:
        """Full structural snapshot as plain JSON-ready data."""
        data: dict[str, Any] = {
            'name': self._name,
            'width': self._width,
            'height': self._height,
            'perspective': self._perspective,
            'palette': self._palette.to_list(),
            'layers': [layer.to_dict() for layer in self._layers],
            'frames': [frame.to_dict() for frame in self._frames],
            'cels': {key: cel.to_dict() for key, cel in self._cels.items()},
            'tags': [tag.to_dict() for tag in self._tags],
        }
        for field in ('tile_width', 'tile_height', 'tile_count'):
            value = getattr(self, field)
            if value is not None:
                data[field] = value
        return data

    def serialize_for_save(self) -> dict[str, Any]:
        """Snapshot for writing to disk; clears the dirty flag."""
        data = self.to_dict()
        self.is_dirty = False
        return data

    def _restore_fields(self, partial: dict[str, Any]) -> None:
        """
        Overwrite a subset of top-level fields from snapshot data.

        Reserved for the command history. It bypasses the validating mutation
        API, so only snapshots produced by ``to_dict()`` may be passed in.
        """
        unknown = set(partial) - self.RESTORABLE_FIELDS
        if unknown:
            raise InvalidArgumentError(f"Cannot restore fields: {', '.join(sorted(unknown))}")

        # Parse everything before assigning anything
        parsed: dict[str, Any] = {}
        if 'palette' in partial:
            parsed['palette'] = Palette.from_list(partial['palette'])
        if 'layers' in partial:
            parsed['layers'] = _parse_layers(partial['layers'])
        if 'frames' in partial:
            parsed['frames'] = _parse_frames(partial['frames'])
        if 'cels' in partial:
            parsed['cels'] = _parse_cels(partial['cels'])
        if 'tags' in partial:
            parsed['tags'] = _parse_tags(partial['tags'])
        for field in ('width', 'height', 'perspective'):
            if field in partial:
                parsed[field] = partial[field]

        for field, value in parsed.items():
            setattr(self, f'_{field}', value)
        self._mark_dirty()

    def _restore_cel(self, key: str, data: Optional[dict[str, Any]]) -> None:
        """Put back one raw cel snapshot (None removes it). History use only."""
        if parse_cel_key(key) is None:
            raise InvalidCelKeyError(key)
        if data is None:
            self._cels.pop(key, None)
        else:
            self._cels[key] = cel_from_dict(data)
        self._mark_dirty()

    def snapshot_fields(self, fields: Iterable[str]) -> dict[str, Any]:
        """Serialized copy of selected top-level fields."""
        fields = list(fields)
        unknown = set(fields) - self.RESTORABLE_FIELDS
        if unknown:
            raise InvalidArgumentError(f"Cannot snapshot fields: {', '.join(sorted(unknown))}")
        serializers = {
            'width': lambda: self._width,
            'height': lambda: self._height,
            'perspective': lambda: self._perspective,
            'palette': self._palette.to_list,
            'layers': lambda: [layer.to_dict() for layer in self._layers],
            'frames': lambda: [frame.to_dict() for frame in self._frames],
            'cels': lambda: {key: cel.to_dict() for key, cel in self._cels.items()},
            'tags': lambda: [tag.to_dict() for tag in self._tags],
        }
        return {field: serializers[field]() for field in fields}

    # ------------------------------------------------------------------
    # Getters
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def perspective(self) -> str:
        return self._perspective

    @property
    def palette(self) -> Palette:
        """Copy of the palette; use the palette methods to change it."""
        return Palette.from_list(self._palette.to_list())

    @property
    def layers(self) -> list[BaseLayer]:
        return [layer.model_copy(deep=True) for layer in self._layers]

    @property
    def frames(self) -> list[Frame]:
        return [frame.model_copy(deep=True) for frame in self._frames]

    @property
    def tags(self) -> list[Tag]:
        return [tag.model_copy(deep=True) for tag in self._tags]

    @property
    def cels(self) -> dict[str, Cel]:
        return {key: copy_cel(cel) for key, cel in self._cels.items()}

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    def get_layer(self, layer_id: int) -> Optional[BaseLayer]:
        """Copy of a layer, or None if it does not exist."""
        layer = self._find_layer(layer_id)
        return layer.model_copy(deep=True) if layer is not None else None

    def to_summary(self) -> dict[str, Any]:
        """Compact description of the document."""
        return {
            'name': self._name,
            'width': self._width,
            'height': self._height,
            'perspective': self._perspective,
            'layer_count': len(self._layers),
            'frame_count': len(self._frames),
            'cel_count': len(self._cels),
            'tag_count': len(self._tags),
            'is_dirty': self.is_dirty,
        }

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    def add_layer(
        self,
        name: str,
        layer_type: str = 'image',
        parent_id: Optional[int] = None,
        index: Optional[int] = None,
        visible: bool = True,
        opacity: int = 255,
        role: Optional[str] = None,
        physics_layer: Optional[int] = None,
    ) -> int:
        """
        Add a layer.

        Args:
            name: Display name
            layer_type: 'image', 'tilemap', 'shape' or 'group'
            parent_id: Id of an existing group layer, or None for root level
            index: Position in the layer list; None appends
            visible: Initial visibility
            opacity: Initial opacity (0-255)
            role: Shape layers only
            physics_layer: Shape layers only (1-32)

        Returns:
            Id of the new layer
        """
        layer_class = get_layer_class(layer_type)
        if parent_id is not None:
            self._require_group(parent_id)
        if index is not None and not 0 <= index <= len(self._layers):
            raise InvalidArgumentError(f"Layer position {index} is out of range 0-{len(self._layers)}")

        fields: dict[str, Any] = {
            'id': max((layer.id for layer in self._layers), default=0) + 1,
            'name': name,
            'visible': visible,
            'opacity': opacity,
            'parent_id': parent_id,
        }
        if layer_class is ShapeLayer:
            if role is not None:
                fields['role'] = role
            if physics_layer is not None:
                fields['physics_layer'] = physics_layer
        elif role is not None or physics_layer is not None:
            raise InvalidArgumentError("role and physics_layer apply to shape layers only")

        try:
            layer = layer_class.model_validate(fields)
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid layer: {exc}") from exc

        if index is None:
            self._layers.append(layer)
        else:
            self._layers.insert(index, layer)
        self._mark_dirty()
        logger.debug("Asset '%s': added %s layer %d", self._name, layer.layer_type, layer.id)
        return layer.id

    def add_group(self, name: str, parent_id: Optional[int] = None, index: Optional[int] = None) -> int:
        """Add a group layer and return its id."""
        return self.add_layer(name, 'group', parent_id=parent_id, index=index)

    def remove_layer(self, layer_id: int) -> list[int]:
        """
        Remove a layer, its group descendants, their cels, and their ids
        from every layer tag. Layer tags left empty are dropped.

        Returns:
            Ids of every removed layer
        """
        self._require_layer(layer_id)
        removed = self._with_descendants(layer_id)

        self._layers = [layer for layer in self._layers if layer.id not in removed]
        self._cels = {
            key: cel for key, cel in self._cels.items()
            if parse_cel_key(key).layer_id not in removed
        }

        tags: list[Tag] = []
        for tag in self._tags:
            if isinstance(tag, LayerTag):
                remaining = [lid for lid in tag.layers if lid not in removed]
                if not remaining:
                    continue
                tag.layers = remaining
            tags.append(tag)
        self._tags = tags

        self._mark_dirty()
        logger.debug("Asset '%s': removed layers %s", self._name, sorted(removed))
        return sorted(removed)

    def reorder_layer(self, layer_id: int, new_parent_id: Optional[int], new_index: int) -> None:
        """
        Move a layer within the list and optionally reparent it.

        Args:
            layer_id: Layer to move
            new_parent_id: Group to move into, or None for root level
            new_index: Position in the layer list after the move
        """
        layer = self._require_layer(layer_id)
        if new_parent_id is not None:
            current: Optional[int] = new_parent_id
            while current is not None:
                if current == layer_id:
                    raise InvalidArgumentError(f"Cannot move layer {layer_id} into its own descendant")
                current = self._require_group(current).parent_id
        if not 0 <= new_index < len(self._layers):
            raise InvalidArgumentError(f"Layer position {new_index} is out of range 0-{len(self._layers) - 1}")

        self._layers.remove(layer)
        layer.parent_id = new_parent_id
        self._layers.insert(new_index, layer)
        self._mark_dirty()

    def set_layer_properties(self, layer_id: int, **changes: Any) -> None:
        """
        Update plain layer properties (name, visible, opacity, role,
        physics_layer). Id, type and parent go through their own operations.
        """
        layer = self._require_layer(layer_id)
        allowed = {'name', 'visible', 'opacity'}
        if isinstance(layer, ShapeLayer):
            allowed |= {'role', 'physics_layer'}
        unknown = set(changes) - allowed
        if unknown:
            raise InvalidArgumentError(
                f"Cannot set {', '.join(sorted(unknown))} on layer {layer_id}"
            )
        try:
            updated = type(layer).model_validate({**layer.model_dump(by_alias=True), **changes})
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid layer properties: {exc}") from exc
        self._layers[self._layers.index(layer)] = updated
        self._mark_dirty()

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    def add_frame(self, duration_ms: Optional[int] = None, index: Optional[int] = None) -> int:
        """
        Insert a frame. Frames, cels, frame tags and links at or after the
        insertion point shift up by one.

        Returns:
            Index of the new frame
        """
        if duration_ms is None:
            duration_ms = settings.DEFAULT_FRAME_DURATION_MS
        count = len(self._frames)
        insert_at = count if index is None else index
        if not 0 <= insert_at <= count:
            raise FrameOutOfRangeError(insert_at, self._name, count)
        if not isinstance(duration_ms, int) or duration_ms < 0:
            raise InvalidArgumentError(f"Frame duration must be a non-negative integer, got {duration_ms!r}")

        self._frames.insert(insert_at, Frame(index=insert_at, duration_ms=duration_ms))
        self._reindex_frames()

        for tag in self._tags:
            if isinstance(tag, FrameTag):
                if tag.start >= insert_at:
                    tag.start += 1
                if tag.end >= insert_at:
                    tag.end += 1

        self._shift_cels(lambda frame: frame + 1 if frame >= insert_at else frame)
        self._mark_dirty()
        return insert_at

    def remove_frame(self, index: int) -> None:
        """
        Remove a frame.

        Cels of the frame are dropped and cels of later frames are re-keyed
        down by one. Links into the removed frame are dropped. A frame tag
        covering only this frame is removed; other frame tags are shifted
        and truncated so they never reference a missing frame.
        """
        self._require_frame(index)
        del self._frames[index]
        self._reindex_frames()

        tags: list[Tag] = []
        for tag in self._tags:
            if isinstance(tag, FrameTag):
                if tag.start == index and tag.end == index:
                    continue
                if tag.start > index:
                    tag.start -= 1
                if tag.end >= index:
                    tag.end -= 1
            tags.append(tag)
        self._tags = tags

        self._cels = {
            key: cel for key, cel in self._cels.items()
            if parse_cel_key(key).frame_index != index
        }
        dangling = [
            key for key, cel in self._cels.items()
            if isinstance(cel, LinkedCel) and cel.target.frame_index == index
        ]
        for key in dangling:
            del self._cels[key]
        self._shift_cels(lambda frame: frame - 1 if frame > index else frame)
        self._mark_dirty()

    def set_frame_duration(self, index: int, duration_ms: int) -> None:
        """Change how long a frame is displayed."""
        frame = self._require_frame(index)
        if not isinstance(duration_ms, int) or duration_ms < 0:
            raise InvalidArgumentError(f"Frame duration must be a non-negative integer, got {duration_ms!r}")
        frame.duration_ms = duration_ms
        self._mark_dirty()

    # ------------------------------------------------------------------
    # Cels
    # ------------------------------------------------------------------

    def get_cel(self, layer_id: int, frame_index: int) -> Optional[Cel]:
        """
        Content at a layer/frame, following links.

        Returns:
            Copy of the resolved cel, or None if absent, broken, or the link
            chain is longer than ``settings.MAX_LINK_DEPTH``
        """
        key = self._resolve_key(pack_cel_key(layer_id, frame_index))
        return copy_cel(self._cels[key]) if key is not None else None

    def get_raw_cel(self, layer_id: int, frame_index: int) -> Optional[Cel]:
        """Stored cel without link resolution (copy), or None."""
        cel = self._cels.get(pack_cel_key(layer_id, frame_index))
        return copy_cel(cel) if cel is not None else None

    def set_cel(self, layer_id: int, frame_index: int, cel: Union[Cel, dict[str, Any]]) -> None:
        """
        Store content at a layer/frame.

        The payload must match the layer: image layers take image cels,
        tilemap layers tilemap cels, shape layers shape cels. Any non-group
        layer may also hold a link to another existing cel on the same layer.

        Raises:
            LayerNotFoundError, FrameOutOfRangeError, TypeMismatchError,
            CelNotFoundError (missing link target), InvalidArgumentError
        """
        if isinstance(cel, dict):
            cel = cel_from_dict(cel)
        layer = self._require_layer(layer_id)
        self._require_frame(frame_index)
        key = pack_cel_key(layer_id, frame_index)

        if layer.CEL_KIND is None:
            raise TypeMismatchError(
                f"Layer {layer_id} is a {layer.layer_type} layer and cannot hold cels",
                expected=None, actual=cel.KIND,
            )
        if isinstance(cel, LinkedCel):
            target = cel.target
            if target.layer_id != layer_id:
                raise InvalidArgumentError(f"Link {cel.link!r} must point at a cel on layer {layer_id}")
            if cel.link == key:
                raise InvalidArgumentError(f"Cel {key} cannot link to itself")
            if cel.link not in self._cels:
                raise CelNotFoundError(cel.link)
        elif cel.KIND != layer.CEL_KIND:
            raise TypeMismatchError(
                f"Layer {layer_id} is a {layer.layer_type} layer and does not accept {cel.KIND} cels",
                expected=layer.CEL_KIND, actual=cel.KIND,
            )

        self._cels[key] = copy_cel(cel)
        self._mark_dirty()

    def remove_cel(self, layer_id: int, frame_index: int) -> bool:
        """
        Delete the stored cel at a layer/frame.

        Returns:
            True if a cel was removed; False if there was none
        """
        self._require_layer(layer_id)
        self._require_frame(frame_index)
        key = pack_cel_key(layer_id, frame_index)
        if key not in self._cels:
            return False
        del self._cels[key]
        self._mark_dirty()
        return True

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def add_tag(self, tag: Union[Tag, dict[str, Any]]) -> None:
        """
        Add a frame or layer tag.

        Frame tags need ``start <= end`` within the frame list and a unique
        name/facing pair. Layer tags need every referenced layer to exist.
        """
        if isinstance(tag, dict):
            tag = tag_from_dict(tag)
        if isinstance(tag, FrameTag):
            count = len(self._frames)
            if tag.start > tag.end:
                raise InvalidArgumentError(f"Frame tag '{tag.name}' has start {tag.start} > end {tag.end}")
            if tag.end >= count:
                raise FrameOutOfRangeError(tag.end, self._name, count)
            for existing in self._tags:
                if isinstance(existing, FrameTag) and existing.name == tag.name and existing.facing == tag.facing:
                    raise InvalidArgumentError(
                        f"Frame tag '{tag.name}' with facing '{tag.facing or 'none'}' already exists"
                    )
        elif isinstance(tag, LayerTag):
            for layer_id in tag.layers:
                self._require_layer(layer_id)
        else:
            raise InvalidArgumentError(f"Unsupported tag {tag!r}")

        self._tags.append(tag.model_copy(deep=True))
        self._mark_dirty()

    def remove_tag(self, name: str, facing: Optional[str] = None) -> int:
        """
        Remove every tag with a name; for frame tags, optionally only the one
        with a given facing.

        Returns:
            Number of tags removed
        """
        kept = [tag for tag in self._tags if not tag.matches(name, facing)]
        removed = len(self._tags) - len(kept)
        if removed == 0:
            raise TagNotFoundError(name, facing)
        self._tags = kept
        self._mark_dirty()
        return removed

    # ------------------------------------------------------------------
    # Shapes
    # ------------------------------------------------------------------

    def get_shapes(self, layer_id: int, frame_index: int) -> list[Shape]:
        """Shapes on a shape layer at a frame (copies; empty if no cel)."""
        self._require_shape_layer(layer_id)
        cel = self.get_cel(layer_id, frame_index)
        return list(cel.shapes) if isinstance(cel, ShapeCel) else []

    def add_shape(self, layer_id: int, frame_index: int, shape: Union[Shape, dict[str, Any]]) -> None:
        """Append a named shape, creating the shape cel if needed."""
        shape = self._coerce_shape(shape)
        cel, key = self._shape_cel(layer_id, frame_index, create=True)
        if cel.find(shape.name) != -1:
            raise InvalidArgumentError(f"Shape '{shape.name}' already exists in cel {key}")
        cel.shapes.append(shape)
        self._cels[key] = cel
        self._mark_dirty()

    def update_shape(self, layer_id: int, frame_index: int, shape_name: str,
                     shape: Union[Shape, dict[str, Any]]) -> None:
        """Replace a named shape."""
        shape = self._coerce_shape(shape)
        cel, key = self._shape_cel(layer_id, frame_index)
        position = cel.find(shape_name) if cel is not None else -1
        if position == -1:
            raise ShapeNotFoundError(shape_name, pack_cel_key(layer_id, frame_index))
        cel.shapes[position] = shape
        self._cels[key] = cel
        self._mark_dirty()

    def remove_shape(self, layer_id: int, frame_index: int, shape_name: str) -> None:
        """Remove a named shape."""
        cel, key = self._shape_cel(layer_id, frame_index)
        position = cel.find(shape_name) if cel is not None else -1
        if position == -1:
            raise ShapeNotFoundError(shape_name, pack_cel_key(layer_id, frame_index))
        del cel.shapes[position]
        self._cels[key] = cel
        self._mark_dirty()

    # ------------------------------------------------------------------
    # Palette
    # ------------------------------------------------------------------

    def set_palette_color(self, index: int, color: Iterable[int]) -> None:
        self._palette.set(index, color)
        self._mark_dirty()

    def set_palette_colors(self, entries: Iterable[tuple[int, Iterable[int]]]) -> None:
        """Apply several palette entries as one validated unit."""
        self._palette.set_bulk(entries)
        self._mark_dirty()

    def clear_palette_color(self, index: int) -> None:
        self._palette.clear(index)
        self._mark_dirty()

    def swap_palette_colors(self, i: int, j: int) -> None:
        self._palette.swap(i, j)
        self._mark_dirty()

    def generate_palette_ramp(self, start: int, end: int) -> None:
        self._palette.generate_ramp(start, end)
        self._mark_dirty()

    # ------------------------------------------------------------------
    # Document-wide
    # ------------------------------------------------------------------

    def set_perspective(self, perspective: Perspective) -> None:
        if perspective not in self.PERSPECTIVES:
            raise InvalidArgumentError(f"Unknown perspective {perspective!r}")
        self._perspective = perspective
        self._mark_dirty()

    def resize(self, width: int, height: int, anchor: Anchor = 'top_left') -> None:
        """
        Change the canvas size.

        Every image cel is reallocated to a full canvas grid: the overlap with
        the old content is copied verbatim (shifted by the anchor), pixels
        outside the new bounds are discarded, and new area is padded with
        palette index 0. Shapes move with the anchor. Discarded pixels are
        only recoverable through a command snapshot taken beforehand.

        Args:
            width: New canvas width
            height: New canvas height
            anchor: Which edge/corner of the old canvas stays fixed
        """
        _require_dimensions(width, height)
        if anchor not in self.ANCHORS:
            raise InvalidArgumentError(f"Unknown anchor {anchor!r}")

        shift_x, shift_y = self._anchor_shift(anchor, width - self._width, height - self._height)
        cels: dict[str, Cel] = {}
        for key, cel in self._cels.items():
            if isinstance(cel, ImageCel):
                cel = ImageCel(
                    x=0, y=0,
                    data=reframe_grid(cel.data, cel.x + shift_x, cel.y + shift_y, width, height),
                )
            elif isinstance(cel, ShapeCel):
                cel = ShapeCel(shapes=[shape.translated(shift_x, shift_y) for shape in cel.shapes])
            cels[key] = cel

        self._cels = cels
        self._width = width
        self._height = height
        self._mark_dirty()
        logger.debug("Asset '%s': resized to %dx%d (anchor %s)", self._name, width, height, anchor)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _mark_dirty(self) -> None:
        self.is_dirty = True

    def _find_layer(self, layer_id: int) -> Optional[BaseLayer]:
        for layer in self._layers:
            if layer.id == layer_id:
                return layer
        return None

    def _require_layer(self, layer_id: int) -> BaseLayer:
        layer = self._find_layer(layer_id)
        if layer is None:
            raise LayerNotFoundError(layer_id, self._name)
        return layer

    def _require_group(self, layer_id: int) -> BaseLayer:
        layer = self._require_layer(layer_id)
        if not isinstance(layer, LayerGroup):
            raise TypeMismatchError(
                f"Layer {layer_id} is not a group layer and cannot be a parent",
                expected='group', actual=layer.layer_type,
            )
        return layer

    def _require_shape_layer(self, layer_id: int) -> ShapeLayer:
        layer = self._require_layer(layer_id)
        if not isinstance(layer, ShapeLayer):
            raise TypeMismatchError(
                f"Layer {layer_id} is not a shape layer",
                expected='shape', actual=layer.layer_type,
            )
        return layer

    def _require_frame(self, index: int) -> Frame:
        if not isinstance(index, int) or not 0 <= index < len(self._frames):
            raise FrameOutOfRangeError(index, self._name, len(self._frames))
        return self._frames[index]

    def _with_descendants(self, layer_id: int) -> set[int]:
        ids = {layer_id}
        pending = [layer_id]
        while pending:
            parent = pending.pop()
            for layer in self._layers:
                if layer.parent_id == parent and layer.id not in ids:
                    ids.add(layer.id)
                    pending.append(layer.id)
        return ids

    def _reindex_frames(self) -> None:
        for position, frame in enumerate(self._frames):
            frame.index = position

    def _shift_cels(self, remap) -> None:
        """Re-key every cel and link target through a frame-index mapping."""
        shifted: dict[str, Cel] = {}
        for key, cel in self._cels.items():
            parsed = parse_cel_key(key)
            if isinstance(cel, LinkedCel):
                target = cel.target
                cel = LinkedCel(link=pack_cel_key(target.layer_id, remap(target.frame_index)))
            shifted[pack_cel_key(parsed.layer_id, remap(parsed.frame_index))] = cel
        self._cels = shifted

    def _resolve_key(self, key: str) -> Optional[str]:
        """Follow links from a key to the cel that holds content."""
        for _ in range(settings.MAX_LINK_DEPTH + 1):
            cel = self._cels.get(key)
            if cel is None:
                return None
            if not isinstance(cel, LinkedCel):
                return key
            key = cel.link
        return None

    def _shape_cel(self, layer_id: int, frame_index: int,
                   create: bool = False) -> tuple[Optional[ShapeCel], str]:
        """Working copy of the shape cel at a layer/frame and its storage key."""
        self._require_shape_layer(layer_id)
        self._require_frame(frame_index)
        key = pack_cel_key(layer_id, frame_index)
        resolved = self._resolve_key(key)
        if resolved is None:
            return (ShapeCel() if create else None), key
        return copy_cel(self._cels[resolved]), resolved

    @staticmethod
    def _coerce_shape(shape: Union[Shape, dict[str, Any]]) -> Shape:
        if isinstance(shape, dict):
            return shape_from_dict(shape)
        return shape.model_copy(deep=True)

    @staticmethod
    def _anchor_shift(anchor: str, grow_x: int, grow_y: int) -> tuple[int, int]:
        vertical, _, horizontal = anchor.partition('_')
        if anchor == 'center':
            vertical, horizontal = 'center', 'center'
        shift_x = {'left': 0, 'center': grow_x // 2, 'right': grow_x}[horizontal]
        shift_y = {'top': 0, 'center': grow_y // 2, 'bottom': grow_y}[vertical]
        return shift_x, shift_y
