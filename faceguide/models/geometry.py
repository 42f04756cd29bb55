"""Geometry value objects shared by the alignment core.

All objects are immutable and recomputed per frame or interaction. Pixel
space types (Point, Box, Dimensions) are kept apart from NormalizedPoint,
whose coordinates are fractions of the image size.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class NormalizedPoint:
    """Landmark position as fractions of image width (u) and height (v)."""
    u: float
    v: float


@dataclass(frozen=True)
class Point:
    """Point in pixel or canvas space."""
    x: float
    y: float

    def __iter__(self):
        """Allow tuple unpacking: x, y = point"""
        return iter((self.x, self.y))


@dataclass(frozen=True)
class Dimensions:
    """Natural pixel size of an image or video frame."""
    w: float
    h: float

    def __bool__(self) -> bool:
        return bool(self.w) and bool(self.h)


@dataclass(frozen=True)
class Box:
    """Pixel-space region with its centre.

    Used for tight landmark bounds, padded regions and final viewports.
    """
    x: float
    y: float
    w: float
    h: float
    cx: float
    cy: float

    @classmethod
    def from_center(cls, cx: float, cy: float, w: float, h: float) -> 'Box':
        return cls(x=cx - w / 2, y=cy - h / 2, w=w, h=h, cx=cx, cy=cy)

    @classmethod
    def from_origin(cls, x: float, y: float, w: float, h: float) -> 'Box':
        return cls(x=x, y=y, w=w, h=h, cx=x + w / 2, cy=y + h / 2)


@dataclass(frozen=True)
class AlignedViewPair:
    """Same-sized crop regions for the reference (A) and comparison (B) images."""
    view_a: Optional[Box] = None
    view_b: Optional[Box] = None

    @property
    def aligned(self) -> bool:
        return self.view_a is not None and self.view_b is not None


@dataclass(frozen=True)
class AffineTransform:
    """2D affine map: (x, y) -> (a*x + c*y + e, b*x + d*y + f)."""
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'AffineTransform':
        """Build from a raw mapping using either {a,b,c,d,tx,ty} or {a,b,e,f} naming.

        Missing c and d are filled in as a similarity (c=-b, d=a); tx/ty win
        over e/f when both are present.
        """
        a = _first_set(data, 'a', default=1.0)
        b = _first_set(data, 'b', default=0.0)
        return cls(
            a=a,
            b=b,
            c=_first_set(data, 'c', default=-b),
            d=_first_set(data, 'd', default=a),
            e=_first_set(data, 'tx', 'e', default=0.0),
            f=_first_set(data, 'ty', 'f', default=0.0),
        )

    def apply(self, x: float, y: float) -> Point:
        return Point(self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)

    def as_matrix(self):
        """Rows of the 2x3 matrix in OpenCV's warpAffine layout."""
        return [[self.a, self.c, self.e], [self.b, self.d, self.f]]


@dataclass(frozen=True)
class SimilarityTransform:
    """Rotation + uniform scale + translation: (a*x - b*y + tx, b*x + a*y + ty)."""
    a: float
    b: float
    tx: float
    ty: float

    def to_affine(self) -> AffineTransform:
        return AffineTransform(a=self.a, b=self.b, c=-self.b, d=self.a, e=self.tx, f=self.ty)

    def apply(self, x: float, y: float) -> Point:
        return Point(self.a * x - self.b * y + self.tx, self.b * x + self.a * y + self.ty)


@dataclass(frozen=True)
class ManualAdjustment:
    """User fine-tuning applied after the solved alignment; rotation in degrees."""
    offset_x: float = 0.0
    offset_y: float = 0.0
    scale: float = 1.0
    rotation: float = 0.0


def _first_set(data: Mapping[str, Any], *keys: str, default: float) -> float:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default
