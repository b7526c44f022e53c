"""Spectral polynomial utilities: Jacobi polynomials, GL nodes, 1D operators."""

from .polynomial import (
    grad_jacobi_p,
    jacobi_gauss_lobatto,
    jacobi_gauss_quadrature,
    jacobi_p,
    legendre_gauss_lobatto_nodes,
    vandermonde,
    vandermonde_x,
)
from .spectral import (
    LegendreLobattoBasis,
    legendre_diff_matrix,
    legendre_mass_matrix,
)

__all__ = [
    # Jacobi polynomials and quadrature
    "jacobi_p",
    "grad_jacobi_p",
    "jacobi_gauss_quadrature",
    "jacobi_gauss_lobatto",
    "legendre_gauss_lobatto_nodes",
    # Vandermonde matrices
    "vandermonde",
    "vandermonde_x",
    # Legendre basis
    "LegendreLobattoBasis",
    "legendre_diff_matrix",
    "legendre_mass_matrix",
]
