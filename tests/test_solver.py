#!/usr/bin/env python3
"""Tests for the optimal trajectory solver."""

import jax
jax.config.update("jax_enable_x64", True)

import pytest
from jax import random, numpy as jnp
from jax.scipy.linalg import lu

from lqcontrol import (
    create_lq_filter,
    construct_W_and_Wm,
    optimal_y,
    solve,
    solve_request,
    predict,
    simulate_a,
    DeterministicRequest,
    StochasticRequest,
    DimensionError,
    ArgumentError,
    SingularSystemError,
)


def discounted_objective(y, y_m, a, d, h, beta):
    """sum_t beta^t {a_t y_t - h y_t^2 / 2 - [d(L) y_t]^2 / 2} for t = 0, ..., N."""
    full = jnp.concatenate([y_m[::-1], y])  # y_{-m}, ..., y_N
    dy = jnp.convolve(full, d, mode="valid")
    disc = beta ** jnp.arange(y.shape[0])
    return jnp.sum(disc * (a * y - 0.5 * h * y ** 2 - 0.5 * dy ** 2))


def test_scalar_scenario():
    """d = [1, 0], h = 1, y_m = [0], a = [1, 1, 1] gives y_t = a_t / 2."""
    lqf = create_lq_filter([1.0, 0.0], 1.0, [0.0])
    path = optimal_y(lqf, jnp.array([1.0, 1.0, 1.0]))

    assert path.y_hist.shape == (4,), f"y_hist should be (4,), got {path.y_hist.shape}"
    assert path.y_hist[0] == 0.0, "The first entry is the initial condition"
    assert jnp.allclose(path.y_hist, jnp.array([0.0, 0.5, 0.5, 0.5]))
    assert path.L.shape == (3, 3) and path.U.shape == (3, 3)
    assert path.y_bar.shape == (3,)


@pytest.mark.parametrize(
    "d, h, y_m",
    [
        ([1.0, -0.5], 0.3, [1.0]),
        ([1.0, -0.9, 0.2], 1.0, [0.5, -0.5]),
        ([2.0, 0.5, -1.0, 0.3], 0.1, [1.0, 0.0, -1.0]),
    ],
)
@pytest.mark.parametrize("beta", [None, 0.95, 0.5])
@pytest.mark.parametrize("N", [3, 12])
def test_first_order_conditions(d, h, y_m, beta, N):
    """The deterministic solution zeroes the gradient of the discounted objective."""
    m = len(d) - 1
    d_arr, y_m_arr = jnp.array(d), jnp.array(y_m)
    a_hist = jnp.sin(jnp.arange(N + 1.0)) + 1.0

    lqf = create_lq_filter(d_arr, h, y_m_arr, beta=beta)
    path = optimal_y(lqf, a_hist)

    assert path.y_hist.shape == (N + m + 1,)
    assert jnp.allclose(path.y_hist[:m], y_m_arr[::-1]), "Initial conditions must be preserved"

    y = path.y_hist[m:]
    grad = jax.grad(discounted_objective)(y, y_m_arr, a_hist, d_arr, h, 1.0 if beta is None else beta)
    assert jnp.allclose(grad, 0.0, atol=1e-8), f"Euler equations violated: {grad}"


def test_factors():
    """L U = P^T W, U has a unit diagonal and y_bar solves the reversed system."""
    lqf = create_lq_filter([1.0, -0.9, 0.2], 0.5, [1.0, -1.0])
    a_hist = jnp.linspace(-1.0, 1.0, 11)
    path = optimal_y(lqf, a_hist)

    W, W_m = construct_W_and_Wm(lqf, 10)
    P, _, _ = lu(W)

    assert jnp.allclose(path.L @ path.U, P.T @ W)
    assert jnp.allclose(jnp.diag(path.U), 1.0)
    assert jnp.allclose(jnp.triu(path.L, 1), 0.0), "L should be lower triangular"
    assert jnp.allclose(W @ path.y_bar, a_hist[::-1] - W_m @ lqf.y_m)
    assert jnp.allclose(path.y_hist[2:], path.y_bar[::-1])


def test_idempotent():
    lqf = create_lq_filter([1.0, -0.9, 0.2], 0.5, [1.0, -1.0], beta=0.9)
    a_hist = jnp.linspace(0.0, 2.0, 8)
    first = optimal_y(lqf, a_hist)
    second = optimal_y(lqf, a_hist)

    for x, y in zip(first, second):
        assert jnp.array_equal(x, y)


def test_stochastic_full_information():
    """With t = N the stochastic solution equals the deterministic one."""
    lqf = create_lq_filter([1.0, -0.9], 1.0, [0.5], r=[1.0, 0.5])
    a_hist = simulate_a(lqf, 15, random.PRNGKey(0))

    stochastic = optimal_y(lqf, a_hist, t=15)
    deterministic = optimal_y(lqf, a_hist)
    assert jnp.allclose(stochastic.y_hist, deterministic.y_hist)


@pytest.mark.parametrize("t", [-1, 0, 5])
def test_stochastic_uses_prediction(t):
    """The stochastic solution solves the deterministic problem for E[a | a_0..a_t]."""
    lqf = create_lq_filter([1.0, -0.9], 1.0, [0.5], r=[1.0, 0.5], h_eps=0.2)
    a_hist = simulate_a(lqf, 10, random.PRNGKey(3))

    stochastic = solve_request(lqf, StochasticRequest(a_hist=a_hist, t=t))
    expected = solve_request(lqf, DeterministicRequest(a_hist=predict(lqf, a_hist, t)))
    assert jnp.allclose(stochastic.y_hist, expected.y_hist)


def test_stochastic_keeps_transformed_coordinates():
    """The stochastic branch does not undo the discount transform."""
    lqf = create_lq_filter([1.0, -0.9], 1.0, [0.5], r=[1.0, 0.5], beta=0.8)
    a_hist = simulate_a(lqf, 6, random.PRNGKey(7))

    path = optimal_y(lqf, a_hist, t=2)
    assert jnp.allclose(path.y_hist[:1], lqf.y_m[::-1])


def test_solve_alias():
    lqf = create_lq_filter([1.0, -0.5], 1.0, [0.0])
    a_hist = jnp.ones(5)
    assert jnp.allclose(solve(lqf, a_hist).y_hist, optimal_y(lqf, a_hist).y_hist)


def test_unknown_request():
    lqf = create_lq_filter([1.0, -0.5], 1.0, [0.0])
    with pytest.raises(TypeError):
        solve_request(lqf, (jnp.ones(5),))


def test_dimension_errors():
    lqf = create_lq_filter([1.0, -0.9, 0.2], 1.0, [0.0, 0.0])

    with pytest.raises(DimensionError):
        optimal_y(lqf, jnp.ones(2))          # N < m

    with pytest.raises(DimensionError):
        optimal_y(lqf, jnp.ones((3, 3)))     # a_hist is not a vector

    with pytest.raises(DimensionError):
        optimal_y(lqf._replace(y_m=jnp.zeros(3)), jnp.ones(5))


def test_stochastic_without_forcing_process():
    lqf = create_lq_filter([1.0, -0.5], 1.0, [0.0])
    with pytest.raises(ArgumentError):
        optimal_y(lqf, jnp.ones(5), t=2)


def test_singular_system():
    lqf = create_lq_filter([0.0, 0.0], 0.0, [0.0])
    with pytest.raises(SingularSystemError):
        optimal_y(lqf, jnp.ones(4))
