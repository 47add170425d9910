from __future__ import annotations

from dataclasses import dataclass, field

from .geodesy import BoundingRegion


@dataclass
class Tile:
    bound_region: BoundingRegion
    children: list["Tile | None"] = field(default_factory=list)
    custom_content_uri: str | None = None

    def present_children(self) -> list["Tile"]:
        # None marks a hole in the sparse tree.
        return [child for child in self.children if child is not None]


@dataclass
class Tileset:
    root: Tile | None = None
