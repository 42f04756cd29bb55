"""Core landmark alignment geometry"""
from .adjustment import clamp, manual_is_neutral, sanitize_manual_adjustment
from .overlay import OverlayPlan, describe_status, plan_overlay
from .regions import (
    align_box,
    bounding_box,
    compute_aligned_views,
    padded_box,
    shared_landmark_ids
)
from .similarity import compose_manual_transform, solve_similarity

__all__ = [
    'clamp',
    'manual_is_neutral',
    'sanitize_manual_adjustment',
    'OverlayPlan',
    'describe_status',
    'plan_overlay',
    'align_box',
    'bounding_box',
    'compute_aligned_views',
    'padded_box',
    'shared_landmark_ids',
    'compose_manual_transform',
    'solve_similarity'
]
