"""Image processing utilities.

This module provides base64 encoding/decoding for images sent to the API and
the OpenCV rendering of an overlay plan: the comparison crop scaled into the
canvas, the reference image warped on top and the control point markers.
"""

import base64
from typing import Optional

import cv2
import numpy as np

from ..core.overlay import OverlayPlan
from ..models.geometry import Box, Dimensions

BACKGROUND_BGR = (240, 240, 240)   # #f0f0f0
MARKER_BGR = (104, 47, 255)        # #ff2f68
MARKER_OUTLINE_BGR = (40, 40, 40)
MARKER_RADIUS = 5

class ImageProcessingError(Exception):
    """Base exception for image processing errors."""
    pass

class ImageDecodingError(ImageProcessingError):
    """Exception raised when image decoding fails."""
    pass

class ImageFormatError(ImageProcessingError):
    """Exception raised when image format is invalid."""
    pass

def decode_base64_image(base64_string: str, max_bytes: Optional[int] = None) -> np.ndarray:
    """Decode base64 string to OpenCV image.

    Args:
        base64_string: Base64 encoded image string, optionally with data URL prefix.
            Example formats:
            - "data:image/png;base64,iVBORw0KGgo..."
            - "iVBORw0KGgo..." (without prefix)
        max_bytes: Upper bound on the decoded payload size.

    Returns:
        Decoded image as numpy array in BGR format.

    Raises:
        ImageDecodingError: If base64 decoding fails or the payload is empty or too large.
        ImageFormatError: If decoded data cannot be read as an image.
    """
    try:
        # Remove data URL prefix if present
        if ';base64,' in base64_string:
            base64_string = base64_string.split(';base64,', 1)[1]
        elif ',' in base64_string:
            base64_string = base64_string.split(',', 1)[1]

        try:
            image_bytes = base64.b64decode(base64_string)
        except Exception as e:
            raise ImageDecodingError(f"Failed to decode base64 string: {str(e)}")

        if not image_bytes:
            raise ImageDecodingError("Image payload is empty")
        if max_bytes is not None and len(image_bytes) > max_bytes:
            raise ImageDecodingError(f"Image payload exceeds {max_bytes} bytes")

        nparr = np.frombuffer(image_bytes, np.uint8)
        image = cv2.imdecode(nparr, cv2.IMREAD_COLOR)
        if image is None:
            raise ImageFormatError("Failed to decode image data")

        return image

    except ImageProcessingError:
        raise
    except Exception as e:
        raise ImageProcessingError(f"Unexpected error processing image: {str(e)}")

def encode_png_data_url(image: np.ndarray) -> str:
    """Encode an image as a PNG data URL.

    Raises:
        ImageFormatError: If OpenCV cannot encode the image.
    """
    ok, buffer = cv2.imencode('.png', image)
    if not ok:
        raise ImageFormatError("Failed to encode image as PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.tobytes()).decode('ascii')

def image_dimensions(image: Optional[np.ndarray]) -> Optional[Dimensions]:
    """Natural size of an image, or None when there is no image."""
    if image is None:
        return None
    height, width = image.shape[:2]
    return Dimensions(w=width, h=height)

def _as_bgr(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    return image

def render_overlay(
    reference: Optional[np.ndarray],
    comparison: Optional[np.ndarray],
    plan: OverlayPlan,
    opacity: float = 0.5,
    show_points: bool = True
) -> np.ndarray:
    """Render an overlay plan into a BGR canvas.

    Args:
        reference: Target image drawn through the plan's transform.
        comparison: Captured image used as the background.
        plan: Result of plan_overlay for these two images.
        opacity: Reference opacity in [0, 1].
        show_points: Draw the control point markers.

    Returns:
        Canvas image of the plan's canvas size.
    """
    canvas_w = int(plan.canvas.w)
    canvas_h = int(plan.canvas.h)
    size = (canvas_w, canvas_h)

    if comparison is not None:
        comparison = _as_bgr(comparison)
        height, width = comparison.shape[:2]
        view = plan.views.view_b or Box.from_origin(0, 0, width, height)
        sx = canvas_w / (view.w or 1)
        sy = canvas_h / (view.h or 1)
        crop = np.float32([[sx, 0, -view.x * sx], [0, sy, -view.y * sy]])
        frame = cv2.warpAffine(comparison, crop, size, flags=cv2.INTER_LINEAR)
    else:
        frame = np.full((canvas_h, canvas_w, 3), BACKGROUND_BGR, dtype=np.uint8)

    if plan.transform is not None and reference is not None:
        reference = _as_bgr(reference)
        matrix = np.float32(plan.transform.as_matrix())
        warped = cv2.warpAffine(reference, matrix, size, flags=cv2.INTER_LINEAR)
        coverage = cv2.warpAffine(
            np.ones(reference.shape[:2], dtype=np.float32), matrix, size, flags=cv2.INTER_LINEAR
        )
        alpha = (coverage * opacity)[..., np.newaxis]
        blended = frame.astype(np.float32) * (1 - alpha) + warped.astype(np.float32) * alpha
        frame = np.clip(blended, 0, 255).astype(np.uint8)

    if show_points:
        for point in plan.markers.values():
            center = (int(round(point.x)), int(round(point.y)))
            cv2.circle(frame, center, MARKER_RADIUS, MARKER_BGR, -1, cv2.LINE_AA)
            cv2.circle(frame, center, MARKER_RADIUS, MARKER_OUTLINE_BGR, 2, cv2.LINE_AA)

    return frame
