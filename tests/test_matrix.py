"""Unit tests for the linear algebra helpers."""
import numpy as np
import pytest

from faceguide.core.matrix import invert_4x4, multiply_matrices, multiply_matrix_vector, transpose


class TestProducts:

    def test_transpose_rectangular(self):
        result = transpose([[1, 2, 3], [4, 5, 6]])
        assert result.tolist() == [[1, 4], [2, 5], [3, 6]]

    def test_multiply_matrices(self):
        result = multiply_matrices([[1, 2], [3, 4]], [[5, 6], [7, 8]])
        assert result.tolist() == [[19, 22], [43, 50]]

    def test_multiply_non_square(self):
        result = multiply_matrices([[1, 0, 2]], [[1], [2], [3]])
        assert result.tolist() == [[7]]

    def test_multiply_matrix_vector(self):
        result = multiply_matrix_vector([[1, 2], [3, 4], [5, 6]], [1, -1])
        assert result.tolist() == [-1, -1, -1]


class TestInvert4x4:

    def test_identity(self):
        assert np.allclose(invert_4x4(np.eye(4)), np.eye(4))

    def test_inverse_times_matrix_is_identity(self):
        matrix = [
            [4, 7, 2, 0],
            [3, 6, 1, 5],
            [2, 5, 3, 1],
            [0, 1, 4, 9],
        ]
        inverse = invert_4x4(matrix)
        assert inverse is not None
        assert np.allclose(np.dot(matrix, inverse), np.eye(4))

    def test_requires_pivoting(self):
        # Zero on the leading diagonal entry
        matrix = [
            [0, 1, 0, 0],
            [1, 0, 0, 0],
            [0, 0, 0, 2],
            [0, 0, 3, 0],
        ]
        inverse = invert_4x4(matrix)
        assert inverse is not None
        assert np.allclose(np.dot(matrix, inverse), np.eye(4))

    def test_singular_returns_none(self):
        matrix = [
            [1, 2, 3, 4],
            [2, 4, 6, 8],
            [0, 1, 0, 1],
            [1, 0, 1, 0],
        ]
        assert invert_4x4(matrix) is None

    def test_near_zero_pivot_returns_none(self):
        assert invert_4x4(np.diag([1.0, 1.0, 1.0, 1e-9])) is None

    def test_input_not_modified(self):
        matrix = np.array([
            [2.0, 0.0, 0.0, 1.0],
            [0.0, 3.0, 0.0, 0.0],
            [1.0, 0.0, 4.0, 0.0],
            [0.0, 0.0, 1.0, 5.0],
        ])
        original = matrix.copy()
        invert_4x4(matrix)
        assert np.array_equal(matrix, original)

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_matches_numpy(self, seed):
        rng = np.random.default_rng(seed)
        matrix = rng.normal(size=(4, 4)) + np.eye(4) * 4
        assert np.allclose(invert_4x4(matrix), np.linalg.inv(matrix))
