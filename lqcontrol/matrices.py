"""Euler-equation system of the finite-horizon LQ problem.

The first-order conditions for y_0, ..., y_N form the linear system

    W y_bar = a_bar - W_m y_m,

written in reversed time: row 0 of ``W`` is the Euler equation for y_N and
row N the one for y_0. Away from the boundaries every row is the band ``phi``
centred on the diagonal. The first m + 1 rows carry the terminal conditions
(partial sums of d_i d_j collected in D_{m+1}), and ``W_m`` couples the last
m rows to the initial conditions y_{-1}, ..., y_{-m}.
"""

import logging
from typing import Tuple

from jax import Array, numpy as jnp

from lqcontrol.core import LQFilter
from lqcontrol.errors import DimensionError
from lqcontrol.utils import as_integer

logger = logging.getLogger(__name__)


def terminal_block(d: Array) -> Array:
    """
    Builds the symmetric matrix D_{m+1} with D[j, k] = d[:j+1] . d[k-j:k+1] for k >= j.

    Args:
        d (Array): Coefficients [d_0, ..., d_m].

    Returns:
        Array: Matrix of shape (m + 1, m + 1).
    """
    m = d.shape[0] - 1
    D = jnp.zeros((m + 1, m + 1), dtype=d.dtype)
    for j in range(m + 1):
        for k in range(j, m + 1):
            D = D.at[j, k].set(d[:j + 1] @ d[k - j:k + 1])

    # Make the matrix symmetric
    return D + D.T - jnp.diag(jnp.diag(D))


def boundary_coupling(D: Array) -> Array:
    """
    Builds M with M[i, j] = D[i-j-1, m] for i > j from the last column of D_{m+1}.

    Args:
        D (Array): Terminal block of shape (m + 1, m + 1).

    Returns:
        Array: Matrix of shape (m + 1, m).
    """
    m = D.shape[0] - 1
    M = jnp.zeros((m + 1, m), dtype=D.dtype)
    for j in range(m):
        for i in range(j + 1, m + 1):
            M = M.at[i, j].set(D[i - j - 1, m])
    return M


def _band(phi: Array, num_rows: int, num_cols: int, offset: int = 0) -> Array:
    """Places phi centred on diagonal ``offset`` of a (num_rows, num_cols) matrix, zero elsewhere."""
    m = (phi.shape[0] - 1) // 2
    rows = jnp.arange(num_rows)[:, None]
    cols = jnp.arange(num_cols)[None, :]
    lag = cols + offset - rows
    inside = jnp.abs(lag) <= m
    return jnp.where(inside, phi[jnp.clip(lag + m, 0, 2 * m)], 0.0)


def construct_W_and_Wm(lqf: LQFilter, N: int) -> Tuple[Array, Array]:
    """
    Constructs the Euler-equation matrix W and the boundary matrix W_m.

    Args:
        lqf (LQFilter): Problem parameters.
        N (int): Horizon, at least ``lqf.m``.

    Returns:
        Tuple[Array, Array]:
            - W: Matrix of shape (N + 1, N + 1), banded with half-bandwidth m.
            - W_m: Matrix of shape (N + 1, m) multiplying [y_{-1}, ..., y_{-m}].
    """
    N = as_integer(N, "N")
    d, m, phi, h = lqf.d, lqf.m, lqf.phi, lqf.h
    if N < m:
        raise DimensionError(f"Horizon N = {N} must be at least m = {m}")

    #---------------------------------------
    # Terminal conditions
    #---------------------------------------
    D = terminal_block(d)
    M = boundary_coupling(D)

    W = jnp.zeros((N + 1, N + 1), dtype=phi.dtype)
    W = W.at[:m + 1, :m + 1].set(D + h * jnp.eye(m + 1, dtype=phi.dtype))

    # Columns of M beyond y_0 belong to the initial conditions, see W_m below
    num_coupled = min(m, N - m)
    W = W.at[:m + 1, m + 1:m + 1 + num_coupled].set(M[:, :num_coupled])

    #----------------------------------------------
    # Euler equations for the remaining periods
    #----------------------------------------------
    # The band is cut at the last column, which leaves the tails of phi
    # for the final m rows.
    W = W.at[m + 1:].set(_band(phi, N + 1, N + 1)[m + 1:])

    # Column j of W_m sits at position N + 1 + j of the extended system
    W_m = _band(phi, N + 1, m, offset=N + 1)

    logger.debug("Constructed W of shape %s and W_m of shape %s", W.shape, W_m.shape)
    return W, W_m
