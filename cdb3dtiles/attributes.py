from __future__ import annotations

from dataclasses import dataclass, field

from .errors import TileFormatError
from .geodesy import Cartographic, HeadingPitchRoll
from .tile import Tile


@dataclass
class InstancesAttributes:
    """Columnar per-instance attributes keyed by CDB attribute code.

    Every column holds one entry per instance; mapping insertion order is the
    column declaration order used when packing binary sections.
    """

    cnams: list[str] = field(default_factory=list)
    integer_attribs: dict[str, list[int]] = field(default_factory=dict)
    double_attribs: dict[str, list[float]] = field(default_factory=dict)
    string_attribs: dict[str, list[str]] = field(default_factory=dict)

    @property
    def instances_count(self) -> int:
        return len(self.cnams)

    def check_columns(self) -> None:
        count = self.instances_count
        for kind, columns in (
            ("integer", self.integer_attribs),
            ("double", self.double_attribs),
            ("string", self.string_attribs),
        ):
            for code, column in columns.items():
                if len(column) != count:
                    raise TileFormatError(
                        f"{kind} attribute {code} has {len(column)} values, expected {count}"
                    )

    def check_selection(self, selection: list[int]) -> None:
        count = self.instances_count
        for index in selection:
            if not (0 <= index < count):
                raise TileFormatError(f"Instance index out of range: {index} (instances: {count})")


@dataclass
class ModelsAttributes:
    tile: Tile
    instances: InstancesAttributes
    cartographic_positions: list[Cartographic] = field(default_factory=list)
    scales: list[tuple[float, float, float]] = field(default_factory=list)
    orientations: list[HeadingPitchRoll] = field(default_factory=list)

    def check_placements(self) -> None:
        count = self.instances.instances_count
        for name, column in (
            ("cartographic_positions", self.cartographic_positions),
            ("scales", self.scales),
            ("orientations", self.orientations),
        ):
            if len(column) != count:
                raise TileFormatError(f"{name} has {len(column)} entries, expected {count}")
