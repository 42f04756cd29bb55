"""Utility functions for image processing"""
from .image import (
    decode_base64_image,
    encode_png_data_url,
    image_dimensions,
    render_overlay
)

__all__ = [
    'decode_base64_image',
    'encode_png_data_url',
    'image_dimensions',
    'render_overlay'
]
