"""Nodal Legendre operators on Gauss-Lobatto points.

Reference operators live on [-1, 1]; `LegendreLobattoBasis` maps them to an
arbitrary interval through the affine map x = a + (b - a)(xi + 1)/2.
"""

from __future__ import annotations

import numpy as np

from .polynomial import (
    legendre_gauss_lobatto_nodes,
    vandermonde,
    vandermonde_x,
)


def legendre_diff_matrix(nodes: np.ndarray) -> np.ndarray:
    r"""
    Nodal differentiation matrix :math:`D_r = V_r V^{-1}` on reference nodes.

    Parameters
    ----------
    nodes : np.ndarray
        Distinct points in [-1, 1], in any order

    Returns
    -------
    np.ndarray
        Matrix of shape (n, n); row i differentiates the degree n-1
        interpolant at nodes[i]
    """
    V = vandermonde(nodes)
    Vr = vandermonde_x(nodes)
    # D V = Vr, solved without forming V^{-1}
    return np.linalg.solve(V.T, Vr.T).T


def legendre_mass_matrix(nodes: np.ndarray) -> np.ndarray:
    """Reference mass matrix (V V^T)^{-1} for the orthonormal Legendre modes."""
    V = vandermonde(nodes)
    return np.linalg.inv(V @ V.T)


class LegendreLobattoBasis:
    """Legendre-Gauss-Lobatto nodal basis on the interval `domain`.

    Operators returned by the methods act on values at the mapped GL nodes;
    the size of the `nodes` argument selects the polynomial order.
    """

    def __init__(self, domain: tuple[float, float] = (-1.0, 1.0)):
        a, b = domain
        if not b > a:
            raise ValueError(f"Empty basis domain {domain}")
        self.domain = (float(a), float(b))

    @property
    def jacobian(self) -> float:
        """dx/dxi of the map from [-1, 1] onto the domain."""
        a, b = self.domain
        return 0.5 * (b - a)

    def nodes(self, num_points: int) -> np.ndarray:
        """GL nodes of order num_points - 1, ascending in the domain."""
        a, _ = self.domain
        xi = legendre_gauss_lobatto_nodes(num_points)
        if self.domain == (-1.0, 1.0):
            return xi
        return a + self.jacobian * (xi + 1.0)

    def diff_matrix(self, nodes: np.ndarray) -> np.ndarray:
        """Differentiation matrix d/dx at the GL nodes of the same size."""
        xi = legendre_gauss_lobatto_nodes(nodes.size)
        return legendre_diff_matrix(xi) / self.jacobian

    def mass_matrix(self, nodes: np.ndarray) -> np.ndarray:
        """Mass matrix on the domain at the GL nodes of the same size."""
        xi = legendre_gauss_lobatto_nodes(nodes.size)
        return self.jacobian * legendre_mass_matrix(xi)

    def vandermonde(self, nodes: np.ndarray) -> np.ndarray:
        """Orthonormal Legendre Vandermonde matrix at the reference GL nodes."""
        return vandermonde(legendre_gauss_lobatto_nodes(nodes.size))
