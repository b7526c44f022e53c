"""Orthonormal Jacobi polynomials, Gauss quadrature and 1D Vandermonde matrices.

All polynomials are normalised to be orthonormal on [-1, 1] with weight
(1 - x)^alpha (1 + x)^beta.

References
----------
Hesthaven & Warburton (2008), "Nodal Discontinuous Galerkin Methods", App. A
"""

from __future__ import annotations

import numpy as np
from scipy.special import gamma


def _gamma0(alpha: float, beta: float) -> float:
    return (
        2 ** (alpha + beta + 1)
        / (alpha + beta + 1)
        * gamma(alpha + 1)
        * gamma(beta + 1)
        / gamma(alpha + beta + 1)
    )


def jacobi_p(x: np.ndarray, alpha: float, beta: float, N: int) -> np.ndarray:
    """
    Evaluate the orthonormal Jacobi polynomial of degree N at points x.

    Parameters
    ----------
    x : np.ndarray
        Evaluation points in [-1, 1]
    alpha, beta : float
        Jacobi weight exponents (alpha, beta > -1)
    N : int
        Polynomial degree

    Returns
    -------
    np.ndarray
        P_N^{(alpha, beta)}(x), same length as x
    """
    xp = np.atleast_1d(np.asarray(x, dtype=float)).ravel()
    PL = np.zeros((N + 1, xp.size))

    gamma0 = _gamma0(alpha, beta)
    PL[0] = 1.0 / np.sqrt(gamma0)
    if N == 0:
        return PL[0]

    gamma1 = (alpha + 1) * (beta + 1) / (alpha + beta + 3) * gamma0
    PL[1] = ((alpha + beta + 2) * xp / 2 + (alpha - beta) / 2) / np.sqrt(gamma1)
    if N == 1:
        return PL[1]

    # Three-term recurrence
    aold = 2 / (2 + alpha + beta) * np.sqrt(
        (alpha + 1) * (beta + 1) / (alpha + beta + 3)
    )
    for i in range(1, N):
        h1 = 2 * i + alpha + beta
        anew = 2 / (h1 + 2) * np.sqrt(
            (i + 1)
            * (i + 1 + alpha + beta)
            * (i + 1 + alpha)
            * (i + 1 + beta)
            / (h1 + 1)
            / (h1 + 3)
        )
        bnew = -(alpha**2 - beta**2) / h1 / (h1 + 2)
        PL[i + 1] = (-aold * PL[i - 1] + (xp - bnew) * PL[i]) / anew
        aold = anew

    return PL[N]


def grad_jacobi_p(x: np.ndarray, alpha: float, beta: float, N: int) -> np.ndarray:
    """Derivative of the orthonormal Jacobi polynomial of degree N at x."""
    xp = np.atleast_1d(np.asarray(x, dtype=float)).ravel()
    if N == 0:
        return np.zeros(xp.size)
    return np.sqrt(N * (N + alpha + beta + 1)) * jacobi_p(xp, alpha + 1, beta + 1, N - 1)


def jacobi_gauss_quadrature(alpha: float, beta: float, N: int):
    """
    Return Gauss quadrature points and weights of order N.

    Parameters
    ----------
    alpha, beta : float
        Jacobi weight exponents
    N : int
        Quadrature order (N+1 points)

    Returns
    -------
    x : np.ndarray
        Quadrature points, ascending
    w : np.ndarray
        Quadrature weights

    Notes
    -----
    Golub-Welsch: the points are the eigenvalues of the symmetric Jacobi
    matrix of the three-term recurrence.
    """
    if N == 0:
        return np.array([(alpha - beta) / (alpha + beta + 2)]), np.array([2.0])

    h1 = 2 * np.arange(N + 1) + alpha + beta
    i = np.arange(1, N + 1)
    with np.errstate(divide="ignore", invalid="ignore"):
        diagonal = -0.5 * (alpha**2 - beta**2) / (h1 + 2) / h1
    off_diagonal = (
        2
        / (h1[:N] + 2)
        * np.sqrt(i * (i + alpha + beta) * (i + alpha) * (i + beta) / (h1[:N] + 1) / (h1[:N] + 3))
    )
    if alpha + beta < 10 * np.finfo(float).eps:
        diagonal[0] = 0.0

    J = np.diag(diagonal) + np.diag(off_diagonal, 1) + np.diag(off_diagonal, -1)
    x, V = np.linalg.eigh(J)
    w = V[0] ** 2 * _gamma0(alpha, beta)
    return x, w


def jacobi_gauss_lobatto(alpha: float, beta: float, N: int) -> np.ndarray:
    """
    Return Gauss-Lobatto points of order N (N+1 points including -1 and 1).

    Parameters
    ----------
    alpha, beta : float
        Jacobi weight exponents
    N : int
        Polynomial order, N >= 1

    Returns
    -------
    np.ndarray
        Ascending nodes on [-1, 1]
    """
    if N < 1:
        raise ValueError(f"Gauss-Lobatto points need order N >= 1, got {N}")
    x = np.empty(N + 1)
    x[0], x[-1] = -1.0, 1.0
    if N > 1:
        x[1:-1], _ = jacobi_gauss_quadrature(alpha + 1, beta + 1, N - 2)
    return x


def legendre_gauss_lobatto_nodes(num_points: int) -> np.ndarray:
    """Legendre-Gauss-Lobatto nodes on [-1, 1] (num_points = N+1)."""
    return jacobi_gauss_lobatto(0.0, 0.0, num_points - 1)


def vandermonde(nodes: np.ndarray, alpha: float = 0.0, beta: float = 0.0) -> np.ndarray:
    """
    Return the 1D Vandermonde matrix V[i, j] = P_j(nodes[i]).

    The number of modes equals the number of nodes.
    """
    nodes = np.asarray(nodes, dtype=float)
    V = np.zeros((nodes.size, nodes.size))
    for j in range(nodes.size):
        V[:, j] = jacobi_p(nodes, alpha, beta, j)
    return V


def vandermonde_x(nodes: np.ndarray, alpha: float = 0.0, beta: float = 0.0) -> np.ndarray:
    """Return the gradient Vandermonde matrix Vx[i, j] = P_j'(nodes[i])."""
    nodes = np.asarray(nodes, dtype=float)
    Vx = np.zeros((nodes.size, nodes.size))
    for j in range(nodes.size):
        Vx[:, j] = grad_jacobi_p(nodes, alpha, beta, j)
    return Vx
