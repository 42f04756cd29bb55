"""Data models and type definitions"""
from .geometry import (
    AffineTransform,
    AlignedViewPair,
    Box,
    Dimensions,
    ManualAdjustment,
    NormalizedPoint,
    Point,
    SimilarityTransform
)
from .types import AlignRequest, AlignResponse, OverlayRequest, OverlayResponse, ErrorResponse

__all__ = [
    'AffineTransform',
    'AlignedViewPair',
    'Box',
    'Dimensions',
    'ManualAdjustment',
    'NormalizedPoint',
    'Point',
    'SimilarityTransform',
    'AlignRequest',
    'AlignResponse',
    'OverlayRequest',
    'OverlayResponse',
    'ErrorResponse'
]
