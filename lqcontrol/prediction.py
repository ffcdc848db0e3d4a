"""Conditional expectations of the forcing process a_t = r(L) eps_t.

The stacked vector a = [a_0, ..., a_N] is Gaussian with the banded Toeplitz
covariance V built from ``phi_r``. With V = L L^T (lower Cholesky factor),
w = L^{-1} a is white noise and its first t + 1 entries are a function of
a_0, ..., a_t only, so

    E[a | a_0, ..., a_t] = L P_t L^{-1} a,

where P_t keeps the first t + 1 entries and zeroes the rest.
"""

import logging

from jax import Array, random, numpy as jnp
from jax.scipy.linalg import cholesky, solve_triangular

from lqcontrol.core import LQFilter, PRNGKey
from lqcontrol.errors import ArgumentError, DimensionError, NonPositiveDefiniteError
from lqcontrol.utils import as_integer, as_vector

logger = logging.getLogger(__name__)


def construct_V(lqf: LQFilter, N: int) -> Array:
    """
    Constructs the covariance matrix of N consecutive values of a_t.

    Args:
        lqf (LQFilter): Problem parameters with a forcing process.
        N (int): Number of periods, positive.

    Returns:
        Array: Symmetric Toeplitz matrix of shape (N, N) with
            V[i, j] = phi_r[k + |i - j|] for |i - j| <= k and zero otherwise.
    """
    if lqf.phi_r is None:
        raise ArgumentError("The filter has no forcing process (r was not given)")
    N = as_integer(N, "N")
    if N <= 0:
        raise ArgumentError(f"N must be a positive integer, got {N}")

    phi_r, k = lqf.phi_r, lqf.k
    idx = jnp.arange(N)
    lag = jnp.abs(idx[:, None] - idx[None, :])
    return jnp.where(lag <= k, phi_r[k + jnp.minimum(lag, k)], 0.0)


def simulate_a(lqf: LQFilter, N: int, rng_key: PRNGKey) -> Array:
    """
    Draws a random path a_0, ..., a_N assuming Gaussian innovations.

    Args:
        lqf (LQFilter): Problem parameters with a forcing process.
        N (int): Last period of the path.
        rng_key (PRNGKey): Random key.

    Returns:
        Array: Sample path of shape (N + 1,).
    """
    V = construct_V(lqf, N + 1)
    return random.multivariate_normal(rng_key, jnp.zeros(N + 1, dtype=V.dtype), V)


def predict(lqf: LQFilter, a_hist, t: int) -> Array:
    """
    Computes E[a_hist | a_t, a_{t-1}, ..., a_0].

    Args:
        lqf (LQFilter): Problem parameters with a forcing process.
        a_hist: Realization a_0, ..., a_N.
        t (int): Period in which the prediction is formed, -1 <= t <= N.
            t = -1 conditions on nothing.

    Returns:
        Array: Conditional expectation of shape (N + 1,).
    """
    a_hist = as_vector(a_hist, "a_hist", error=DimensionError)
    N = a_hist.shape[0] - 1
    t = as_integer(t, "t")
    if not -1 <= t <= N:
        raise ArgumentError(f"Information time t = {t} must lie in [-1, {N}]")

    V = construct_V(lqf, N + 1)
    L = cholesky(V, lower=True)
    if not jnp.all(jnp.isfinite(L)):
        raise NonPositiveDefiniteError(f"Covariance matrix of size {N + 1} is not positive definite")

    # Whitened innovations beyond t are mean zero given a_0, ..., a_t
    w = solve_triangular(L, a_hist, lower=True)
    w = jnp.where(jnp.arange(N + 1) <= t, w, 0.0)
    return L @ w


covariance = construct_V
simulate = simulate_a
