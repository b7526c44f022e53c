"""Tests for the Legendre-Gauss-Lobatto basis: nodes, differentiation and mass matrices."""

import numpy as np
import pytest


class TestLegendreNodes:
    """Tests for Legendre-Gauss-Lobatto nodes."""

    def test_nodes_correct_count(self, legendre_basis):
        """Nodes array has correct size."""
        for N in [2, 5, 9, 17]:
            nodes = legendre_basis.nodes(N)
            assert len(nodes) == N

    def test_nodes_endpoints(self, legendre_basis):
        """Nodes include domain endpoints [0, 1]."""
        nodes = legendre_basis.nodes(7)
        assert np.isclose(nodes[0], 0.0, atol=1e-14)
        assert np.isclose(nodes[-1], 1.0, atol=1e-14)

    def test_nodes_symmetric(self, legendre_basis):
        """Nodes are symmetric about domain center."""
        nodes = legendre_basis.nodes(10)
        assert np.allclose(nodes + nodes[::-1], 1.0, atol=1e-14)


class TestDifferentiationMatrix:
    """Tests for the Legendre differentiation matrix."""

    def test_diff_matrix_row_sum(self, legendre_basis):
        """Row sums are zero (derivative of constant is zero)."""
        nodes = legendre_basis.nodes(12)
        D = legendre_basis.diff_matrix(nodes)
        assert np.allclose(D.sum(axis=1), 0, atol=1e-11)

    @pytest.mark.parametrize("N", [3, 6, 10])
    def test_diff_polynomial(self, legendre_basis, N):
        """Exact differentiation of polynomials up to degree N."""
        nodes = legendre_basis.nodes(N + 1)
        D = legendre_basis.diff_matrix(nodes)

        # d/dx[x^N] = N x^(N-1)
        f = nodes**N
        assert np.allclose(D @ f, N * nodes ** (N - 1), atol=1e-9)

    def test_diff_trigonometric(self, legendre_basis):
        """Spectral accuracy for smooth functions."""
        nodes = legendre_basis.nodes(25)
        D = legendre_basis.diff_matrix(nodes)
        f = np.sin(np.pi * nodes)
        error = np.max(np.abs(D @ f - np.pi * np.cos(np.pi * nodes)))
        assert error < 1e-9, f"Error {error} too high"


class TestMassMatrix:
    """Tests for the Legendre mass matrix."""

    @pytest.mark.parametrize("N", [2, 5, 8])
    def test_integrates_polynomials(self, legendre_basis, N):
        """1^T M f integrates polynomials of degree <= N exactly."""
        nodes = legendre_basis.nodes(N + 1)
        M = legendre_basis.mass_matrix(nodes)
        f = nodes**N
        assert np.isclose(np.ones(N + 1) @ M @ f, 1.0 / (N + 1), atol=1e-12)

    def test_symmetric_positive_definite(self, legendre_basis):
        nodes = legendre_basis.nodes(6)
        M = legendre_basis.mass_matrix(nodes)
        assert np.allclose(M, M.T)
        assert np.all(np.linalg.eigvalsh(M) > 0)
