"""
2D geometric primitives shared by the generators, the growth projector and the renderer.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np


class GeometryError(ValueError):
    """Raised when inputs would produce degenerate (NaN or infinite) geometry."""


@dataclass(frozen=True)
class Point:
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: 'Point') -> 'Point':
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Point') -> 'Point':
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> 'Point':
        return Point(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> 'Point':
        return self.__mul__(scalar)

    def __repr__(self) -> str:
        return f"Point({self.x:.2f}, {self.y:.2f})"

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x ** 2 + self.y ** 2)

    def distance_to(self, other: 'Point') -> float:
        return (self - other).magnitude

    def lerp(self, other: 'Point', t: float) -> 'Point':
        omt = 1 - t
        return Point(omt * self.x + t * other.x, omt * self.y + t * other.y)

    def transform(self, scale: float, offset_x: float, offset_y: float) -> 'Point':
        return Point(self.x * scale + offset_x, self.y * scale + offset_y)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def to_tuple(self) -> tuple:
        return (self.x, self.y)

    @classmethod
    def from_tuple(cls, t: tuple) -> 'Point':
        return cls(t[0], t[1])

    @classmethod
    def polar(cls, origin: 'Point', length: float, angle_degrees: float) -> 'Point':
        """Point at `length` from origin along a heading given in degrees."""
        rad = angle_degrees * (math.pi / 180)
        return cls(origin.x + length * math.cos(rad), origin.y + length * math.sin(rad))


@dataclass(frozen=True)
class Color:
    """RGB channels in [0, 255], alpha in [0, 1]."""
    r: float
    g: float
    b: float
    a: float = 1.0

    def brighten(self, dr: float, dg: float = None, db: float = None) -> 'Color':
        dg = dr if dg is None else dg
        db = dr if db is None else db
        return Color(min(255, self.r + dr), min(255, self.g + dg), min(255, self.b + db), self.a)

    def to_rgba(self) -> Tuple[float, float, float, float]:
        """Channels as 0..1 floats, the form Cairo expects."""
        return (self.r / 255.0, self.g / 255.0, self.b / 255.0, self.a)

    def to_list(self) -> list:
        return [self.r, self.g, self.b, self.a]

    @classmethod
    def from_list(cls, values: list) -> 'Color':
        return cls(*values)

    @classmethod
    def from_hex(cls, value: str, alpha: float = 1.0) -> 'Color':
        """Color from a '#RRGGBB' string."""
        value = value.lstrip('#')
        if len(value) != 6:
            raise ValueError(f"Expected a #RRGGBB color, got '#{value}'")
        return cls(int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16), alpha)


@dataclass(frozen=True)
class Bounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center_x(self) -> float:
        return self.min_x + self.width / 2

    @classmethod
    def empty(cls) -> 'Bounds':
        return cls(math.inf, -math.inf, math.inf, -math.inf)

    @property
    def is_empty(self) -> bool:
        return self.min_x > self.max_x or self.min_y > self.max_y

    @classmethod
    def from_arrays(cls, xs: np.ndarray, ys: np.ndarray) -> 'Bounds':
        if len(xs) == 0:
            return cls.empty()
        return cls(float(np.min(xs)), float(np.max(xs)), float(np.min(ys)), float(np.max(ys)))

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> 'Bounds':
        arr = np.array([p.to_tuple() for p in points], dtype=float).reshape(-1, 2)
        return cls.from_arrays(arr[:, 0], arr[:, 1])

    def union(self, other: 'Bounds') -> 'Bounds':
        return Bounds(
            min(self.min_x, other.min_x),
            max(self.max_x, other.max_x),
            min(self.min_y, other.min_y),
            max(self.max_y, other.max_y),
        )

    def contains_point(self, p: Point, tol: float = 1e-9) -> bool:
        return (self.min_x - tol <= p.x <= self.max_x + tol
                and self.min_y - tol <= p.y <= self.max_y + tol)

    def contains_circle(self, center: Point, radius: float, tol: float = 1e-9) -> bool:
        return (self.min_x - tol <= center.x - radius and center.x + radius <= self.max_x + tol
                and self.min_y - tol <= center.y - radius and center.y + radius <= self.max_y + tol)

    def __repr__(self) -> str:
        return (f"Bounds(x=[{self.min_x:.2f}, {self.max_x:.2f}], "
                f"y=[{self.min_y:.2f}, {self.max_y:.2f}])")
