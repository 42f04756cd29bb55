"""Region geometry for co-aligning two differently sized images.

Landmark clusters are bounded, padded for context and then fitted into a
common viewport size so both images can be rendered into one canvas at the
same relative scale.
"""

import logging
import math
from typing import List, Mapping, Optional, Sequence

from ..models.geometry import AlignedViewPair, Box, Dimensions, NormalizedPoint

logger = logging.getLogger(__name__)

PADDING_RATIO = 0.25     # Padding per side, relative to the longer box side
MIN_SIZE_RATIO = 0.25    # Minimum region size, relative to the smaller image side
MIN_SHARED_IDS = 3

Landmarks = Mapping[str, NormalizedPoint]


def shared_landmark_ids(points_a: Optional[Landmarks], points_b: Optional[Landmarks]) -> List[str]:
    """Ids present in both maps, in the first map's order, then the second's."""
    points_a = points_a or {}
    points_b = points_b or {}
    ids: List[str] = []
    seen = set()
    for landmark_id in list(points_a) + list(points_b):
        if landmark_id in seen:
            continue
        if points_a.get(landmark_id) is not None and points_b.get(landmark_id) is not None:
            ids.append(landmark_id)
            seen.add(landmark_id)
    return ids


def _pixel(point: NormalizedPoint, width: float, height: float):
    try:
        x = point.u * width
        y = point.v * height
    except (AttributeError, TypeError):
        return None
    if not math.isfinite(x) or not math.isfinite(y):
        return None
    return x, y


def bounding_box(
    points: Optional[Landmarks],
    ids: Sequence[str],
    dims: Optional[Dimensions]
) -> Optional[Box]:
    """Pixel bounding box of the named landmarks.

    Ids with missing or non-finite coordinates are skipped. Width and height
    are floored at 1.

    Returns:
        Box with centre, or None if no landmark contributed.
    """
    if not points or not ids:
        return None
    width = dims.w if dims is not None else 0
    height = dims.h if dims is not None else 0

    pixels = []
    for landmark_id in ids:
        point = points.get(landmark_id)
        if point is None:
            continue
        pixel = _pixel(point, width, height)
        if pixel is not None:
            pixels.append(pixel)

    if not pixels:
        return None

    xs = [x for x, _ in pixels]
    ys = [y for _, y in pixels]
    min_x, min_y = min(xs), min(ys)
    box_w = max(1, max(xs) - min_x)
    box_h = max(1, max(ys) - min_y)
    return Box.from_origin(min_x, min_y, box_w, box_h)


def padded_box(box: Optional[Box], dims: Optional[Dimensions]) -> Optional[Box]:
    """Grow a box for visual context while keeping its centre.

    Pads by 25% of the longer side on each side, enforces a floor of 25% of
    the smaller image side and caps at the image size.
    """
    if box is None:
        return None
    dim_w = dims.w if dims is not None else 0
    dim_h = dims.h if dims is not None else 0

    pad = max(box.w, box.h) * PADDING_RATIO
    min_size = min(dim_w, dim_h) * MIN_SIZE_RATIO
    width = box.w + pad * 2
    height = box.h + pad * 2
    if min_size:
        width = max(width, min_size)
        height = max(height, min_size)
    if dim_w:
        width = min(width, dim_w)
    if dim_h:
        height = min(height, dim_h)

    return Box.from_center(box.cx, box.cy, max(1, width), max(1, height))


def align_box(
    box: Optional[Box],
    target_width: float,
    target_height: float,
    dims: Optional[Dimensions]
) -> Optional[Box]:
    """Centre a window of the target size on the box, kept inside the image.

    The window is shifted rather than shrunk whenever the image is large
    enough to hold it.
    """
    if box is None:
        return None
    dim_w = dims.w if dims is not None else target_width
    dim_h = dims.h if dims is not None else target_height

    width = max(1, min(target_width, dim_w))
    height = max(1, min(target_height, dim_h))
    x = box.cx - width / 2
    y = box.cy - height / 2

    if dim_w:
        if x < 0:
            x = 0
        if x + width > dim_w:
            x = max(0, dim_w - width)
    if dim_h:
        if y < 0:
            y = 0
        if y + height > dim_h:
            y = max(0, dim_h - height)

    return Box.from_origin(x, y, width, height)


def compute_aligned_views(
    points_a: Optional[Landmarks],
    points_b: Optional[Landmarks],
    ids: Sequence[str],
    dims_a: Optional[Dimensions],
    dims_b: Optional[Dimensions]
) -> AlignedViewPair:
    """Matching viewports for two images sharing at least three landmarks.

    Both views get the element-wise maximum of the padded boxes, limited to
    each image's size. When that size can not hold one of the padded boxes
    the pair is left empty instead of cropping unevenly.
    """
    if not ids or len(ids) < MIN_SHARED_IDS:
        return AlignedViewPair()
    if not dims_a or not dims_b:
        return AlignedViewPair()

    box_a = padded_box(bounding_box(points_a, ids, dims_a), dims_a)
    box_b = padded_box(bounding_box(points_b, ids, dims_b), dims_b)
    if box_a is None or box_b is None:
        return AlignedViewPair()

    target_w = min(max(box_a.w, box_b.w), dims_a.w, dims_b.w)
    target_h = min(max(box_a.h, box_b.h), dims_a.h, dims_b.h)
    if target_w < box_a.w or target_w < box_b.w or target_h < box_a.h or target_h < box_b.h:
        logger.debug(
            f"Alignment infeasible: target {target_w}x{target_h}, "
            f"boxes {box_a.w}x{box_a.h} and {box_b.w}x{box_b.h}"
        )
        return AlignedViewPair()

    return AlignedViewPair(
        view_a=align_box(box_a, target_w, target_h, dims_a),
        view_b=align_box(box_b, target_w, target_h, dims_b),
    )
