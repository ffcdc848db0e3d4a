from typing import NamedTuple, Optional, Union

import chex
from jax import Array

PRNGKey = chex.PRNGKey


class LQFilter(NamedTuple):
    """Parameters of a scalar LQ control / filtering problem.

    The objective is

        sum_{t=0}^{N} beta^t {a_t y_t - h y_t^2 / 2 - [d(L) y_t]^2 / 2}

    with d(L) = d_0 + d_1 L + ... + d_m L^m and initial conditions
    y_{-1}, ..., y_{-m}. When a discount factor is given, ``d`` and ``y_m``
    hold the transformed coefficients and ``phi`` is derived from them.

    Attributes:
        d (Array): Lag-polynomial coefficients [d_0, ..., d_m], shape (m + 1,).
        h (float): Weight on the level of y_t.
        y_m (Array): Initial conditions [y_{-1}, ..., y_{-m}], shape (m,).
        m (int): Order of d(L).
        phi (Array): Autocovariance-generating coefficients, shape (2m + 1,),
            with ``h`` added at the centre.
        beta (float): Discount factor, 1.0 for an undiscounted problem.
        phi_r (Optional[Array]): Autocovariance of the forcing process'
            moving-average polynomial, shape (2k + 1,). None if deterministic.
        k (Optional[int]): Order of r(L). None if deterministic.
    """
    d: Array
    h: float
    y_m: Array
    m: int
    phi: Array
    beta: float
    phi_r: Optional[Array]
    k: Optional[int]


class CharacteristicRoots(NamedTuple):
    """Roots of the characteristic polynomial lying outside the unit circle."""
    z_1_to_m: Array  # Roots sorted by descending modulus (m,)
    z_0: Array       # Normalizing constant
    lambdas: Array   # Reciprocals 1 / z_i (m,)


class DecayRepresentation(NamedTuple):
    """Decay rates and residues of 1 / [c(z) c(1/z)]."""
    lambdas: Array  # (m,)
    A: Array        # (m,)


class OptimalPath(NamedTuple):
    """Solution of the finite-horizon Euler equations.

    Attributes:
        y_hist (Array): Trajectory [y_{-m}, ..., y_{-1}, y_0, ..., y_N], shape (N + m + 1,).
        L (Array): Lower factor of W with the pivots on its diagonal.
        U (Array): Unit upper factor of W.
        y_bar (Array): Free variables in reversed time order [y_N, ..., y_0].
    """
    y_hist: Array
    L: Array
    U: Array
    y_bar: Array


class DeterministicRequest(NamedTuple):
    """Solve with a known forcing sequence a_0, ..., a_N."""
    a_hist: Array


class StochasticRequest(NamedTuple):
    """Solve with the forcing sequence replaced by E[a | a_0, ..., a_t]."""
    a_hist: Array
    t: int


SolveRequest = Union[DeterministicRequest, StochasticRequest]
