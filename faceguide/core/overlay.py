"""Per-frame overlay planning.

One call performs everything the overlay view needs before drawing: the
matched viewports, the canvas size, the control point similarity solve
(reference pixels -> comparison canvas pixels), the manual fine-tuning and
a status line for the user.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..models.geometry import (
    AffineTransform,
    AlignedViewPair,
    Box,
    Dimensions,
    ManualAdjustment,
    NormalizedPoint,
    Point,
    SimilarityTransform,
)
from .adjustment import MANUAL_DEFAULTS, manual_is_neutral
from .regions import MIN_SHARED_IDS, compute_aligned_views, shared_landmark_ids
from .similarity import CORRESPONDENCE_COUNT, compose_manual_transform, solve_similarity

logger = logging.getLogger(__name__)

DEFAULT_CONTROL_IDS = ('left_pupil', 'right_pupil', 'nose_tip')
DEFAULT_CANVAS_WIDTH = 600
DEFAULT_ASPECT = 0.75

STATUS_OK = 'ok'
STATUS_WARN = 'warn'
STATUS_MUTED = 'muted'

Landmarks = Mapping[str, NormalizedPoint]


@dataclass(frozen=True)
class OverlayPlan:
    views: AlignedViewPair
    canvas: Dimensions
    control_ids: Tuple[str, ...]
    similarity: Optional[SimilarityTransform] = None
    transform: Optional[AffineTransform] = None
    markers: Dict[str, Point] = field(default_factory=dict)
    manual_active: bool = False

    @property
    def overlay_applied(self) -> bool:
        return self.transform is not None


def control_ids_from(control_points: Optional[Mapping[str, str]]) -> Tuple[str, ...]:
    """Control landmark ids from a {cp1, cp2, cp3} mapping; defaults unless all three are set."""
    if control_points:
        ids = tuple(control_points.get(key) for key in ('cp1', 'cp2', 'cp3'))
        if all(ids):
            return ids
    return DEFAULT_CONTROL_IDS


def to_natural(point: Optional[NormalizedPoint], dims: Optional[Dimensions]) -> Optional[Point]:
    if point is None or not dims:
        return None
    try:
        x = point.u * dims.w
        y = point.v * dims.h
    except (AttributeError, TypeError):
        return None
    if not math.isfinite(x) or not math.isfinite(y):
        return None
    return Point(x, y)


def to_canvas_point(
    point: Optional[NormalizedPoint],
    dims: Optional[Dimensions],
    view: Optional[Box],
    canvas: Dimensions
) -> Optional[Point]:
    """Map a landmark into canvas pixels, through the view when there is one."""
    natural = to_natural(point, dims)
    if natural is None:
        return None
    if view is not None:
        return Point(
            (natural.x - view.x) / (view.w or 1) * canvas.w,
            (natural.y - view.y) / (view.h or 1) * canvas.h,
        )
    return Point(
        natural.x / (dims.w or 1) * canvas.w,
        natural.y / (dims.h or 1) * canvas.h,
    )


def fit_canvas(frame: Optional[Union[Box, Dimensions]], container_width: float = 0) -> Dimensions:
    """Canvas matching the frame's aspect ratio at the container width."""
    width = container_width or DEFAULT_CANVAS_WIDTH
    frame_w = frame.w if frame is not None else 0
    frame_h = frame.h if frame is not None else 0
    base_w = frame_w or width
    base_h = frame_h or base_w * DEFAULT_ASPECT
    aspect = base_h / base_w if base_w else DEFAULT_ASPECT
    return Dimensions(w=width, h=max(1, round(width * aspect)))


def plan_overlay(
    points_a: Optional[Landmarks],
    points_b: Optional[Landmarks],
    dims_a: Optional[Dimensions],
    dims_b: Optional[Dimensions],
    manual: Optional[ManualAdjustment] = None,
    control_ids: Sequence[str] = DEFAULT_CONTROL_IDS,
    container_width: float = 0
) -> OverlayPlan:
    """Plan one overlay frame of reference image A over comparison image B.

    Args:
        points_a: Reference landmarks.
        points_b: Comparison landmarks.
        dims_a: Reference image size.
        dims_b: Comparison image size.
        manual: Manual fine-tuning, identity when omitted.
        control_ids: The three landmark ids used for the similarity solve.
        container_width: Canvas width to fit into.

    Returns:
        OverlayPlan. `transform` is None whenever the overlay can not be
        placed (missing control points, missing sizes, singular solve).
    """
    points_a = points_a or {}
    points_b = points_b or {}
    manual = manual or MANUAL_DEFAULTS

    shared = shared_landmark_ids(points_a, points_b)
    if len(shared) >= MIN_SHARED_IDS:
        views = compute_aligned_views(points_a, points_b, shared, dims_a, dims_b)
    else:
        views = AlignedViewPair()

    view_b = views.view_b
    canvas = fit_canvas(view_b if view_b is not None else dims_b, container_width)

    ids = tuple(
        i for i in control_ids if points_a.get(i) is not None and points_b.get(i) is not None
    )

    similarity = None
    transform = None
    if len(ids) == CORRESPONDENCE_COUNT:
        src = [to_natural(points_a[i], dims_a) for i in ids]
        dst = [to_canvas_point(points_b[i], dims_b, view_b, canvas) for i in ids]
        if all(p is not None for p in src + dst):
            similarity = solve_similarity(src, dst)
            transform = compose_manual_transform(similarity, manual)
        if transform is None:
            logger.debug(f"No overlay transform for control points {ids}")

    markers = {}
    for landmark_id in ids:
        point = to_canvas_point(points_b[landmark_id], dims_b, view_b, canvas)
        if point is not None:
            markers[landmark_id] = point

    return OverlayPlan(
        views=views,
        canvas=canvas,
        control_ids=ids,
        similarity=similarity,
        transform=transform,
        markers=markers,
        manual_active=not manual_is_neutral(manual),
    )


def describe_status(
    has_reference: bool,
    has_comparison: bool,
    points_used: int,
    overlay_applied: bool,
    manual_active: bool,
    capturing: bool = False
) -> Tuple[str, str]:
    """User-facing status line and its level (ok, warn or muted)."""
    parts: List[str] = []
    if not has_reference:
        parts.append('Waiting for target image to load.')
    if not has_comparison:
        if capturing:
            parts.append('Waiting for live capture...')
        else:
            parts.append(
                'No comparison image detected. Start a capture or freeze a frame in the main tool.'
            )
    if points_used < CORRESPONDENCE_COUNT:
        parts.append('At least three shared landmarks are required for alignment.')
    else:
        parts.append('Use the manual offset, scale, and rotation controls for fine tuning once aligned.')
        if manual_active:
            parts.append('Manual adjustments active, reset to return to the auto alignment.')
    if overlay_applied:
        parts.append('Overlay active, adjust opacity or freeze the frame as needed.')

    if overlay_applied:
        level = STATUS_OK
    elif has_comparison and points_used >= CORRESPONDENCE_COUNT:
        level = STATUS_WARN
    else:
        level = STATUS_MUTED
    return ' '.join(parts), level
