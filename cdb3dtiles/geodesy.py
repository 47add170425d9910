from __future__ import annotations

import math
from dataclasses import dataclass


WGS84_A = 6378137.0
WGS84_F = 1 / 298.257223563


def _deg_to_rad(value: float) -> float:
    return value * math.pi / 180.0


def _mat4_mul(a: list[float], b: list[float]) -> list[float]:
    out = [0.0] * 16
    for col in range(4):
        for row in range(4):
            out[col * 4 + row] = (
                a[0 * 4 + row] * b[col * 4 + 0]
                + a[1 * 4 + row] * b[col * 4 + 1]
                + a[2 * 4 + row] * b[col * 4 + 2]
                + a[3 * 4 + row] * b[col * 4 + 3]
            )
    return out


def _mat4_rot_x(rad: float) -> list[float]:
    c = math.cos(rad)
    s = math.sin(rad)
    return [1.0, 0.0, 0.0, 0.0, 0.0, c, s, 0.0, 0.0, -s, c, 0.0, 0.0, 0.0, 0.0, 1.0]


def _mat4_rot_y(rad: float) -> list[float]:
    c = math.cos(rad)
    s = math.sin(rad)
    return [c, 0.0, -s, 0.0, 0.0, 1.0, 0.0, 0.0, s, 0.0, c, 0.0, 0.0, 0.0, 0.0, 1.0]


def _mat4_rot_z(rad: float) -> list[float]:
    c = math.cos(rad)
    s = math.sin(rad)
    return [c, s, 0.0, 0.0, -s, c, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0, 1.0]


def mat4_column(m: list[float], index: int) -> tuple[float, float, float]:
    return (m[index * 4 + 0], m[index * 4 + 1], m[index * 4 + 2])


def normalize_vec3(v: tuple[float, float, float]) -> tuple[float, float, float]:
    length = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    if length == 0:
        return (0.0, 0.0, 0.0)
    return (v[0] / length, v[1] / length, v[2] / length)


@dataclass(frozen=True)
class Cartographic:
    longitude: float
    latitude: float
    height: float = 0.0

    @staticmethod
    def from_degrees(longitude: float, latitude: float, height: float = 0.0) -> "Cartographic":
        return Cartographic(_deg_to_rad(longitude), _deg_to_rad(latitude), height)


@dataclass(frozen=True)
class HeadingPitchRoll:
    """Model orientation in degrees. Heading is clockwise from north."""

    heading: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0

    def to_matrix(self) -> list[float]:
        h_mat = _mat4_rot_z(-_deg_to_rad(self.heading))
        p_mat = _mat4_rot_y(_deg_to_rad(self.pitch))
        r_mat = _mat4_rot_x(_deg_to_rad(self.roll))
        return _mat4_mul(h_mat, _mat4_mul(p_mat, r_mat))


@dataclass(frozen=True)
class Ellipsoid:
    semi_major_axis: float
    flattening: float

    @property
    def eccentricity_squared(self) -> float:
        return self.flattening * (2 - self.flattening)

    def geodetic_surface_normal(self, cartographic: Cartographic) -> tuple[float, float, float]:
        cos_lat = math.cos(cartographic.latitude)
        return (
            cos_lat * math.cos(cartographic.longitude),
            cos_lat * math.sin(cartographic.longitude),
            math.sin(cartographic.latitude),
        )

    def cartographic_to_cartesian(self, cartographic: Cartographic) -> tuple[float, float, float]:
        sin_lat = math.sin(cartographic.latitude)
        cos_lat = math.cos(cartographic.latitude)
        sin_lon = math.sin(cartographic.longitude)
        cos_lon = math.cos(cartographic.longitude)
        e2 = self.eccentricity_squared
        height = cartographic.height

        n = self.semi_major_axis / math.sqrt(1.0 - e2 * sin_lat * sin_lat)
        return (
            (n + height) * cos_lat * cos_lon,
            (n + height) * cos_lat * sin_lon,
            ((1.0 - e2) * n + height) * sin_lat,
        )

    def east_north_up_to_fixed_frame(self, cartographic: Cartographic) -> list[float]:
        sin_lat = math.sin(cartographic.latitude)
        cos_lat = math.cos(cartographic.latitude)
        sin_lon = math.sin(cartographic.longitude)
        cos_lon = math.cos(cartographic.longitude)

        east = (-sin_lon, cos_lon, 0.0)
        north = (-sin_lat * cos_lon, -sin_lat * sin_lon, cos_lat)
        up = self.geodetic_surface_normal(cartographic)
        x, y, z = self.cartographic_to_cartesian(cartographic)

        return [
            east[0],
            east[1],
            east[2],
            0.0,
            north[0],
            north[1],
            north[2],
            0.0,
            up[0],
            up[1],
            up[2],
            0.0,
            x,
            y,
            z,
            1.0,
        ]


WGS84 = Ellipsoid(WGS84_A, WGS84_F)


def calculate_model_orientation(
    cartographic: Cartographic, orientation: HeadingPitchRoll, ellipsoid: Ellipsoid = WGS84
) -> list[float]:
    local_to_fixed = ellipsoid.east_north_up_to_fixed_frame(cartographic)
    return _mat4_mul(local_to_fixed, orientation.to_matrix())


@dataclass(frozen=True)
class Rectangle:
    west: float
    south: float
    east: float
    north: float

    def center(self) -> Cartographic:
        return Cartographic((self.west + self.east) / 2, (self.south + self.north) / 2, 0.0)

    def union(self, other: "Rectangle") -> "Rectangle":
        return Rectangle(
            min(self.west, other.west),
            min(self.south, other.south),
            max(self.east, other.east),
            max(self.north, other.north),
        )

    def contains(self, other: "Rectangle") -> bool:
        return (
            self.west <= other.west
            and self.south <= other.south
            and self.east >= other.east
            and self.north >= other.north
        )


@dataclass(frozen=True)
class BoundingRegion:
    rectangle: Rectangle
    minimum_height: float = 0.0
    maximum_height: float = 0.0

    def union(self, other: "BoundingRegion") -> "BoundingRegion":
        return BoundingRegion(
            self.rectangle.union(other.rectangle),
            min(self.minimum_height, other.minimum_height),
            max(self.maximum_height, other.maximum_height),
        )

    def contains(self, other: "BoundingRegion") -> bool:
        return (
            self.rectangle.contains(other.rectangle)
            and self.minimum_height <= other.minimum_height
            and self.maximum_height >= other.maximum_height
        )

    def to_region_array(self) -> list[float]:
        r = self.rectangle
        return [r.west, r.south, r.east, r.north, self.minimum_height, self.maximum_height]

    @staticmethod
    def from_region_array(values: list[float]) -> "BoundingRegion":
        west, south, east, north, min_h, max_h = (float(v) for v in values)
        return BoundingRegion(Rectangle(west, south, east, north), min_h, max_h)
