"""Optimal trajectory of the finite-horizon LQ problem.

Solves the Euler equations W y_bar = a_bar - W_m y_m with a pivoted LU
factorization W = P L U. The factors are renormalized so that U has a unit
diagonal and L carries the pivots.
"""

import logging
from typing import Optional, Tuple

from jax import Array, numpy as jnp
from jax.scipy.linalg import lu, solve_triangular

from lqcontrol.core import (
    LQFilter,
    OptimalPath,
    SolveRequest,
    DeterministicRequest,
    StochasticRequest,
)
from lqcontrol.errors import DimensionError, SingularSystemError
from lqcontrol.matrices import construct_W_and_Wm
from lqcontrol.prediction import predict
from lqcontrol.utils import as_vector, discount_weights

logger = logging.getLogger(__name__)


def factor_W(W: Array) -> Tuple[Array, Array, Array]:
    """
    Factors W = P L U with partial pivoting and moves the pivots from U into L.

    Args:
        W (Array): Square matrix.

    Returns:
        Tuple[Array, Array, Array]:
            - P: Permutation matrix.
            - L: Lower-triangular factor whose diagonal holds the pivots.
            - U: Upper-triangular factor with unit diagonal.
    """
    P, L, U = lu(W)
    pivots = jnp.diag(U)

    if not jnp.all(jnp.isfinite(pivots)):
        raise SingularSystemError("LU factorization of W produced non-finite pivots")
    scale = jnp.max(jnp.abs(pivots))
    eps = jnp.finfo(W.dtype).eps
    ratio = jnp.min(jnp.abs(pivots)) / scale if scale > 0 else 0.0
    if ratio <= W.shape[0] * eps:
        raise SingularSystemError(f"W is singular to working precision (pivot ratio {float(ratio):.2e})")
    if ratio < jnp.sqrt(eps):
        logger.warning("W is ill-conditioned (pivot ratio %.2e)", float(ratio))

    # lu normalizes L to a unit diagonal; renormalize with D = diag(1 / diag(U))
    D = jnp.diag(1.0 / pivots)
    U = D @ U
    L = L @ jnp.diag(pivots)
    return P, L, U


def _validate(lqf: LQFilter, a_hist) -> Array:
    a_hist = as_vector(a_hist, "a_hist", error=DimensionError)
    N = a_hist.shape[0] - 1
    if lqf.y_m.shape[0] != lqf.m:
        raise DimensionError(f"y_m must have length m = {lqf.m}, got {lqf.y_m.shape[0]}")
    if N < lqf.m:
        raise DimensionError(f"a_hist must have at least m + 1 = {lqf.m + 1} entries, got {N + 1}")
    return a_hist


def _solve_reversed(lqf: LQFilter, W: Array, W_m: Array, a_rev: Array) -> OptimalPath:
    P, L, U = factor_W(W)

    a_bar = a_rev - W_m @ lqf.y_m
    Uy = solve_triangular(L, P.T @ a_bar, lower=True)   # U y_bar = L^{-1} P^T a_bar
    y_bar = solve_triangular(U, Uy, lower=False)        # y_bar = U^{-1} L^{-1} P^T a_bar

    # Calendar order: y_{-m}, ..., y_{-1}, y_0, ..., y_N
    y_hist = jnp.concatenate([y_bar, lqf.y_m])[::-1]
    return OptimalPath(y_hist=y_hist, L=L, U=U, y_bar=y_bar)


def solve_request(lqf: LQFilter, request: SolveRequest) -> OptimalPath:
    """
    Calculates the optimal y_t sequence for a deterministic or stochastic request.

    A ``DeterministicRequest`` treats ``a_hist`` as the known sequence a_t. A
    ``StochasticRequest`` solves the combined control and prediction problem,
    replacing ``a_hist`` by E[a_hist | a_0, ..., a_t].

    Args:
        lqf (LQFilter): Problem parameters.
        request (SolveRequest): Forcing sequence and information set.

    Returns:
        OptimalPath: Trajectory of length N + m + 1, the factors L and U of W,
            and the free variables y_bar in reversed time order.
    """
    if not isinstance(request, (DeterministicRequest, StochasticRequest)):
        raise TypeError(f"Unsupported request type: {type(request).__name__}")

    beta, m = lqf.beta, lqf.m
    a_hist = _validate(lqf, request.a_hist)
    N = a_hist.shape[0] - 1
    W, W_m = construct_W_and_Wm(lqf, N)

    if isinstance(request, DeterministicRequest):
        a_rev = a_hist[::-1]

        #--------------------------------------------
        # Transform the a sequence if beta is given
        #--------------------------------------------
        if beta != 1:
            a_rev = a_rev * discount_weights(beta, jnp.arange(N, -1, -1))

        path = _solve_reversed(lqf, W, W_m, a_rev)

        #--------------------------------------------
        # Transform the optimal sequence back if beta is given
        #--------------------------------------------
        if beta != 1:
            path = path._replace(y_hist=path.y_hist * discount_weights(beta, -jnp.arange(-m, N + 1)))
    else:
        Ea_hist = predict(lqf, a_hist, request.t)
        path = _solve_reversed(lqf, W, W_m, Ea_hist[::-1])

    logger.debug("Solved %s over horizon N=%d", type(request).__name__, N)
    return path


def optimal_y(lqf: LQFilter, a_hist, t: Optional[int] = None) -> OptimalPath:
    """
    Calculates the optimal y_t sequence.

    Args:
        lqf (LQFilter): Problem parameters.
        a_hist: Forcing sequence a_0, ..., a_N, either deterministic or a
            particular realization.
        t (Optional[int]): If given, the problem is stochastic and a_t is
            forecast from the information available in period t.

    Returns:
        OptimalPath: See ``solve_request``.
    """
    if t is None:
        return solve_request(lqf, DeterministicRequest(a_hist=a_hist))
    return solve_request(lqf, StochasticRequest(a_hist=a_hist, t=t))


solve = optimal_y
