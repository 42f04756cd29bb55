"""Similarity solving and manual fine-tuning composition.

The solver fits rotation + uniform scale + translation to exactly three
landmark correspondences with least squares. The composer then layers the
user's manual adjustment on top of the solved transform, in output space.
"""

import logging
import math
from typing import Optional, Sequence, Union

from ..models.geometry import AffineTransform, ManualAdjustment, Point, SimilarityTransform
from .matrix import invert_4x4, multiply_matrices, multiply_matrix_vector, transpose

logger = logging.getLogger(__name__)

CORRESPONDENCE_COUNT = 3

PointLike = Union[Point, Sequence[float]]


def solve_similarity(
    source_points: Sequence[PointLike],
    destination_points: Sequence[PointLike]
) -> Optional[SimilarityTransform]:
    """Solve the similarity transform mapping source points onto destination points.

    Each correspondence (xs, ys) -> (xd, yd) contributes two rows to the
    design matrix over the unknowns [a, b, tx, ty]:

        [xs, -ys, 1, 0] -> xd
        [ys,  xs, 0, 1] -> yd

    and the resulting 6x4 system is solved with the normal equations.

    Args:
        source_points: Three (x, y) points.
        destination_points: Three (x, y) points, in the same order.

    Returns:
        SimilarityTransform, or None if either side does not hold exactly
        three points or the normal equations are singular.
    """
    if (
        _count(source_points) != CORRESPONDENCE_COUNT
        or _count(destination_points) != CORRESPONDENCE_COUNT
    ):
        return None

    design = []
    target = []
    try:
        for source, destination in zip(source_points, destination_points):
            xs, ys = (float(value) for value in source)
            xd, yd = (float(value) for value in destination)
            design.append([xs, -ys, 1.0, 0.0])
            target.append(xd)
            design.append([ys, xs, 0.0, 1.0])
            target.append(yd)
    except (TypeError, ValueError) as e:
        logger.debug(f"Similarity solve failed: malformed point ({e})")
        return None
    if not all(math.isfinite(value) for value in target + [row[0] for row in design]):
        logger.debug("Similarity solve failed: non-finite point")
        return None

    design_t = transpose(design)
    normal = multiply_matrices(design_t, design)
    rhs = multiply_matrix_vector(design_t, target)

    inverse = invert_4x4(normal)
    if inverse is None:
        logger.debug("Similarity solve failed: normal equations are singular")
        return None

    a, b, tx, ty = (float(value) for value in multiply_matrix_vector(inverse, rhs))
    return SimilarityTransform(a=a, b=b, tx=tx, ty=ty)


def _count(points) -> int:
    if points is None or isinstance(points, str):
        return -1
    try:
        return len(points)
    except TypeError:
        return -1


def compose_manual_transform(
    base: Optional[Union[AffineTransform, SimilarityTransform]],
    manual: Optional[ManualAdjustment]
) -> Optional[AffineTransform]:
    """Apply the manual adjustment after the base transform.

    The manual part is scale * R(rotation) plus (offset_x, offset_y), acting
    in output space: out = manual o base.

    Returns:
        The composed AffineTransform, or None if either input is missing.
    """
    if base is None or manual is None:
        return None
    if isinstance(base, SimilarityTransform):
        base = base.to_affine()

    theta = math.radians(manual.rotation)
    cos = math.cos(theta)
    sin = math.sin(theta)
    m00 = manual.scale * cos
    m01 = -manual.scale * sin
    m10 = manual.scale * sin
    m11 = manual.scale * cos

    return AffineTransform(
        a=m00 * base.a + m01 * base.b,
        b=m10 * base.a + m11 * base.b,
        c=m00 * base.c + m01 * base.d,
        d=m10 * base.c + m11 * base.d,
        e=m00 * base.e + m01 * base.f + manual.offset_x,
        f=m10 * base.e + m11 * base.f + manual.offset_y,
    )
