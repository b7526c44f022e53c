"""Tests for Jacobi polynomials, Gauss quadrature and Vandermonde matrices."""

import numpy as np
import pytest

from spectral import (
    grad_jacobi_p,
    jacobi_gauss_lobatto,
    jacobi_gauss_quadrature,
    jacobi_p,
    vandermonde,
    vandermonde_x,
)


class TestJacobiPolynomials:
    """Orthonormality and derivatives."""

    @pytest.mark.parametrize("alpha, beta", [(0.0, 0.0), (1.0, 1.0), (3.0, 0.0)])
    def test_orthonormal(self, alpha, beta):
        """Gauss quadrature of P_i P_j with the Jacobi weight gives the identity."""
        x, w = jacobi_gauss_quadrature(alpha, beta, 10)
        P = np.array([jacobi_p(x, alpha, beta, n) for n in range(6)])
        gram = (P * w) @ P.T
        assert np.allclose(gram, np.eye(6), atol=1e-12)

    def test_legendre_degree_one(self):
        x = np.linspace(-1, 1, 5)
        assert np.allclose(jacobi_p(x, 0.0, 0.0, 1), np.sqrt(1.5) * x)

    def test_gradient_matches_finite_difference(self):
        x = np.linspace(-0.9, 0.9, 7)
        h = 1e-6
        fd = (jacobi_p(x + h, 0.0, 0.0, 4) - jacobi_p(x - h, 0.0, 0.0, 4)) / (2 * h)
        assert np.allclose(grad_jacobi_p(x, 0.0, 0.0, 4), fd, atol=1e-6)

    def test_gradient_of_constant(self):
        assert np.all(grad_jacobi_p(np.array([0.1, 0.5]), 0.0, 0.0, 0) == 0.0)


class TestGaussLobatto:
    """Gauss-Lobatto points."""

    @pytest.mark.parametrize("N", [1, 2, 5, 12])
    def test_endpoints_and_count(self, N):
        x = jacobi_gauss_lobatto(0.0, 0.0, N)
        assert x.size == N + 1
        assert x[0] == -1.0 and x[-1] == 1.0
        assert np.all(np.diff(x) > 0)

    def test_order_two_midpoint(self):
        assert np.allclose(jacobi_gauss_lobatto(0.0, 0.0, 2), [-1.0, 0.0, 1.0])

    def test_rejects_order_zero(self):
        with pytest.raises(ValueError):
            jacobi_gauss_lobatto(0.0, 0.0, 0)


class TestVandermonde:
    """1D Vandermonde matrices."""

    def test_invertible(self):
        x = jacobi_gauss_lobatto(0.0, 0.0, 8)
        assert np.linalg.cond(vandermonde(x)) < 1e3

    def test_columns_are_modes(self):
        x = jacobi_gauss_lobatto(0.0, 0.0, 4)
        V = vandermonde(x)
        Vx = vandermonde_x(x)
        assert np.allclose(V[:, 3], jacobi_p(x, 0.0, 0.0, 3))
        assert np.allclose(Vx[:, 3], grad_jacobi_p(x, 0.0, 0.0, 3))
