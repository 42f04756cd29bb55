"""Pytest configuration and shared fixtures for the alignment tests."""
import logging

import cv2
import numpy as np
import pytest
from fastapi.testclient import TestClient

from faceguide.models.geometry import Dimensions, NormalizedPoint


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)


@pytest.fixture
def triangle_points():
    """Three landmarks spanning a 30x30 box on a 100x100 image."""
    return {
        'a': NormalizedPoint(0.1, 0.2),
        'b': NormalizedPoint(0.4, 0.3),
        'c': NormalizedPoint(0.2, 0.5),
    }


@pytest.fixture
def face_points_a():
    """Reference landmarks using the default control ids."""
    return {
        'left_pupil': NormalizedPoint(0.2, 0.2),
        'right_pupil': NormalizedPoint(0.4, 0.2),
        'nose_tip': NormalizedPoint(0.3, 0.4),
    }


@pytest.fixture
def face_points_b():
    """Comparison landmarks using the default control ids."""
    return {
        'left_pupil': NormalizedPoint(0.1, 0.1),
        'right_pupil': NormalizedPoint(0.3, 0.1),
        'nose_tip': NormalizedPoint(0.2, 0.3),
    }


@pytest.fixture
def dims_a():
    return Dimensions(w=400, h=500)


@pytest.fixture
def dims_b():
    return Dimensions(w=600, h=600)


def _png_data_url(width: int, height: int, color) -> str:
    import base64
    image = np.full((height, width, 3), color, dtype=np.uint8)
    ok, buffer = cv2.imencode('.png', image)
    assert ok
    return 'data:image/png;base64,' + base64.b64encode(buffer.tobytes()).decode('ascii')


@pytest.fixture
def reference_png():
    """400x500 solid red reference image as a data URL."""
    return _png_data_url(400, 500, (0, 0, 255))


@pytest.fixture
def comparison_png():
    """600x600 solid blue comparison image as a data URL."""
    return _png_data_url(600, 600, (255, 0, 0))


@pytest.fixture
def client():
    from faceguide.main import app
    return TestClient(app)
