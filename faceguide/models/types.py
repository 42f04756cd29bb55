"""Wire types for the alignment API"""
from typing import Dict, List, Optional
from typing_extensions import TypedDict

class PointPayload(TypedDict):
    u: float
    v: float

class DimsPayload(TypedDict):
    w: float
    h: float

class CanvasPointPayload(TypedDict):
    x: float
    y: float

class BoxPayload(TypedDict):
    x: float
    y: float
    w: float
    h: float
    cx: float
    cy: float

class SimilarityPayload(TypedDict):
    a: float
    b: float
    tx: float
    ty: float

class AffinePayload(TypedDict):
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float

class ManualAdjustmentPayload(TypedDict, total=False):
    offsetX: float
    offsetY: float
    scale: float
    rotation: float

class ControlPointsPayload(TypedDict, total=False):
    cp1: str
    cp2: str
    cp3: str

class StatusPayload(TypedDict):
    message: str
    level: str

class _LandmarkState(TypedDict):
    pointsA: Dict[str, PointPayload]
    pointsB: Dict[str, PointPayload]

class AlignRequest(_LandmarkState, total=False):
    dimsA: DimsPayload
    dimsB: DimsPayload
    controlPoints: ControlPointsPayload
    manual: ManualAdjustmentPayload
    canvasWidth: float

class OverlayRequest(_LandmarkState, total=False):
    imgA: str
    imgB: str
    controlPoints: ControlPointsPayload
    manual: ManualAdjustmentPayload
    canvasWidth: float
    opacity: float
    showPoints: bool

class AlignResponse(TypedDict):
    viewA: Optional[BoxPayload]
    viewB: Optional[BoxPayload]
    canvas: DimsPayload
    controlIds: List[str]
    similarity: Optional[SimilarityPayload]
    transform: Optional[AffinePayload]
    markers: Dict[str, CanvasPointPayload]
    manualActive: bool
    status: StatusPayload

class OverlayResponse(AlignResponse):
    image: str

class ErrorResponse(TypedDict):
    error: str
    traceback: Optional[str]
