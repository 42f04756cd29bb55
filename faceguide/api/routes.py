"""Landmark alignment API routes.

This module provides the API endpoints for aligning a reference face image
with a comparison image from user-placed landmarks, returning the matched
viewports and overlay transform or a fully rendered overlay.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from typing import Dict, Mapping, Optional
from ..config import Settings, get_settings
from ..core.adjustment import clamp, opacity_fraction, sanitize_manual_adjustment
from ..core.overlay import OverlayPlan, control_ids_from, describe_status, plan_overlay
from ..models.geometry import Box, Dimensions, NormalizedPoint
from ..models.types import (
    AlignRequest,
    AlignResponse,
    BoxPayload,
    ErrorResponse,
    OverlayRequest,
    OverlayResponse
)
from ..utils.image import (
    ImageProcessingError,
    decode_base64_image,
    encode_png_data_url,
    image_dimensions,
    render_overlay
)

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter()

def _landmarks(payload: Optional[Mapping[str, Mapping[str, float]]]) -> Dict[str, NormalizedPoint]:
    return {
        landmark_id: NormalizedPoint(u=point['u'], v=point['v'])
        for landmark_id, point in (payload or {}).items()
    }

def _dims(payload: Optional[Mapping[str, float]]) -> Optional[Dimensions]:
    if not payload:
        return None
    return Dimensions(w=payload['w'], h=payload['h'])

def _box(box: Optional[Box]) -> Optional[BoxPayload]:
    if box is None:
        return None
    return {'x': box.x, 'y': box.y, 'w': box.w, 'h': box.h, 'cx': box.cx, 'cy': box.cy}

def _plan_response(plan: OverlayPlan, has_reference: bool, has_comparison: bool) -> AlignResponse:
    message, level = describe_status(
        has_reference=has_reference,
        has_comparison=has_comparison,
        points_used=len(plan.control_ids),
        overlay_applied=plan.overlay_applied,
        manual_active=plan.manual_active
    )
    similarity = plan.similarity
    transform = plan.transform
    return {
        'viewA': _box(plan.views.view_a),
        'viewB': _box(plan.views.view_b),
        'canvas': {'w': plan.canvas.w, 'h': plan.canvas.h},
        'controlIds': list(plan.control_ids),
        'similarity': None if similarity is None else {
            'a': similarity.a, 'b': similarity.b, 'tx': similarity.tx, 'ty': similarity.ty
        },
        'transform': None if transform is None else {
            'a': transform.a, 'b': transform.b, 'c': transform.c,
            'd': transform.d, 'e': transform.e, 'f': transform.f
        },
        'markers': {
            landmark_id: {'x': point.x, 'y': point.y}
            for landmark_id, point in plan.markers.items()
        },
        'manualActive': plan.manual_active,
        'status': {'message': message, 'level': level}
    }

def _canvas_width(request_data: Mapping, settings: Settings) -> float:
    width = request_data.get('canvasWidth')
    if not width:
        return settings.canvas_width
    return clamp(width, 1, settings.max_canvas_width)

def _internal_error(e: Exception) -> HTTPException:
    import traceback
    error_details: ErrorResponse = {
        'error': str(e),
        'traceback': traceback.format_exc()
    }
    logger.error("Error details:", extra=error_details)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=error_details
    )

@router.get("/health")
async def health() -> Dict[str, str]:
    return {'status': 'ok'}

@router.post("/align", response_model=AlignResponse)
async def align(
    request_data: AlignRequest,
    settings: Settings = Depends(get_settings)
) -> AlignResponse:
    """Compute matched viewports and the overlay transform from landmarks.

    Args:
        request_data: Landmark state for both images.
            - pointsA / pointsB: Normalized landmarks keyed by landmark id
            - dimsA / dimsB: Natural pixel size of each image
            - controlPoints: Optional {cp1, cp2, cp3} control landmark ids
            - manual: Optional manual offset, scale and rotation
            - canvasWidth: Optional canvas width to fit into

    Returns:
        Aligned views, canvas size, solved and composed transforms, control
        point markers and a status message. Views and transforms are null
        when alignment is not currently possible.
    """
    try:
        dims_a = _dims(request_data.get('dimsA'))
        dims_b = _dims(request_data.get('dimsB'))
        plan = plan_overlay(
            _landmarks(request_data.get('pointsA')),
            _landmarks(request_data.get('pointsB')),
            dims_a,
            dims_b,
            manual=sanitize_manual_adjustment(request_data.get('manual')),
            control_ids=control_ids_from(request_data.get('controlPoints')),
            container_width=_canvas_width(request_data, settings)
        )
        logger.info(
            f"Alignment planned: views={'yes' if plan.views.aligned else 'no'}, "
            f"overlay={'yes' if plan.overlay_applied else 'no'}"
        )
        return _plan_response(plan, bool(dims_a), bool(dims_b))

    except ValueError as e:
        logger.warning(f"Validation error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        raise _internal_error(e)

@router.post("/overlay", response_model=OverlayResponse)
def overlay(
    request_data: OverlayRequest,
    settings: Settings = Depends(get_settings)
) -> OverlayResponse:
    """Render the reference image over the comparison image.

    Args:
        request_data: Landmark state plus base64-encoded images.
            - imgA: Target (reference) image
            - imgB: Comparison image
            - opacity: Overlay opacity in percent, default 50
            - showPoints: Draw control point markers, default true

    Returns:
        The alignment plan as returned by /align plus `image`, the rendered
        canvas as a PNG data URL.

    Raises:
        HTTPException: If an image cannot be decoded
    """
    try:
        reference = None
        comparison = None
        if request_data.get('imgA'):
            logger.info("Decoding reference image...")
            reference = decode_base64_image(request_data['imgA'], settings.max_image_bytes)
        if request_data.get('imgB'):
            logger.info("Decoding comparison image...")
            comparison = decode_base64_image(request_data['imgB'], settings.max_image_bytes)

        plan = plan_overlay(
            _landmarks(request_data.get('pointsA')),
            _landmarks(request_data.get('pointsB')),
            image_dimensions(reference),
            image_dimensions(comparison),
            manual=sanitize_manual_adjustment(request_data.get('manual')),
            control_ids=control_ids_from(request_data.get('controlPoints')),
            container_width=_canvas_width(request_data, settings)
        )

        logger.info("Rendering overlay...")
        canvas = render_overlay(
            reference,
            comparison,
            plan,
            opacity=opacity_fraction(request_data.get('opacity')),
            show_points=request_data.get('showPoints', True)
        )

        response = _plan_response(plan, reference is not None, comparison is not None)
        response['image'] = encode_png_data_url(canvas)
        return response

    except ImageProcessingError as e:
        logger.warning(f"Image processing error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except ValueError as e:
        logger.warning(f"Validation error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        raise _internal_error(e)
