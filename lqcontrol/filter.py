"""Construction of the LQ filter parameters.

Builds the immutable ``LQFilter`` record for the problem

    max sum_{t=0}^{N} beta^t {a_t y_t - h y_t^2 / 2 - [d(L) y_t]^2 / 2}

with initial conditions y_{-1}, ..., y_{-m} and, optionally, a forcing process
a_t = r(L) eps_t whose autocovariance feeds the conditional-expectation
predictor.
"""

import logging
from typing import Optional, Union

from jax import Array, numpy as jnp

from lqcontrol.config import LQExperiment, LQProblem
from lqcontrol.core import LQFilter
from lqcontrol.errors import ArgumentError, ShapeError
from lqcontrol.utils import as_vector, discount_weights

logger = logging.getLogger(__name__)


def autocovariance(coeffs: Array) -> Array:
    """
    Computes the full autocorrelation of a finite coefficient vector.

    For coefficients c_0, ..., c_n the result has length 2n + 1 and entry
    n - i equal to sum_j c_j c_{j+i}, so it is symmetric around the centre.

    Args:
        coeffs (Array): Coefficients of shape (n + 1,).

    Returns:
        Array: Autocovariance-generating coefficients of shape (2n + 1,).
    """
    coeffs = jnp.asarray(coeffs)
    return jnp.convolve(coeffs, coeffs[::-1], mode="full")


def create_lq_filter(
    d,
    h: float,
    y_m,
    r=None,
    beta: Optional[float] = None,
    h_eps: Optional[float] = None,
) -> LQFilter:
    """Create the parameter record of an LQ control / filtering problem.

    Args:
        d: Coefficients [d_0, d_1, ..., d_m] (1-D or a column vector).
        h: Weight on the quadratic term h y_t^2 / 2, non-negative.
        y_m: Initial conditions [y_{-1}, ..., y_{-m}] (1-D or a column vector).
        r: Coefficients [r_0, ..., r_k] of the forcing process. If None, the
            problem is deterministic.
        beta: Discount factor in (0, 1]. If None, the problem is undiscounted.
        h_eps: Variance of an additional white-noise term of the forcing
            process, added to the centre of ``phi_r``.

    Returns:
        LQFilter with ``phi`` computed from the (discount-transformed) ``d``.
    """
    d = as_vector(d, "d")
    y_m = as_vector(y_m, "y_m")

    if d.shape[0] == 0:
        raise ShapeError("d must contain at least one coefficient")

    m = d.shape[0] - 1
    if y_m.shape[0] != m:
        raise ShapeError(f"y_m and d must be of same length = {m}, got len(y_m) = {y_m.shape[0]}")

    if h < 0:
        raise ArgumentError(f"h must be non-negative, got {h}")

    # Transformed variables of the discounted problem
    if beta is None:
        beta = 1.0
    else:
        if not 0 < beta <= 1:
            raise ArgumentError(f"beta must lie in (0, 1], got {beta}")
        beta = float(beta)
        d = d * discount_weights(beta, jnp.arange(m + 1))
        y_m = y_m * discount_weights(beta, -jnp.arange(1, m + 1))

    phi = autocovariance(d)
    phi = phi.at[m].add(h)

    if r is None:
        k = None
        phi_r = None
    else:
        r = as_vector(r, "r")
        if r.shape[0] == 0:
            raise ShapeError("r must contain at least one coefficient")
        k = r.shape[0] - 1
        phi_r = autocovariance(r)
        if h_eps is not None:
            if h_eps < 0:
                raise ArgumentError(f"h_eps must be non-negative, got {h_eps}")
            phi_r = phi_r.at[k].add(h_eps)

    logger.debug("Created LQ filter with m=%d, k=%s, beta=%s", m, k, beta)
    return LQFilter(d=d, h=float(h), y_m=y_m, m=m, phi=phi, beta=beta, phi_r=phi_r, k=k)


def create_lq_filter_from_config(config: Union[LQProblem, LQExperiment]) -> LQFilter:
    """Create an ``LQFilter`` from a problem or experiment configuration."""
    return create_lq_filter(
        config.d,
        config.h,
        config.y_m,
        r=config.r,
        beta=config.beta,
        h_eps=config.h_eps,
    )
