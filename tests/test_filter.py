#!/usr/bin/env python3
"""Tests for the construction of LQ filter parameters."""

import jax
jax.config.update("jax_enable_x64", True)

import pytest
from jax import numpy as jnp

from lqcontrol import (
    autocovariance,
    create_lq_filter,
    create_lq_filter_from_config,
    ShapeError,
    ArgumentError,
)
from lqcontrol.config import LQProblem, LQExperiment


def test_scalar_scenario():
    """d = [1, 0], h = 1 gives phi = [0, 2, 0]."""
    lqf = create_lq_filter([1.0, 0.0], 1.0, [0.0])

    assert lqf.m == 1
    assert lqf.beta == 1.0
    assert jnp.allclose(lqf.phi, jnp.array([0.0, 2.0, 0.0])), f"Unexpected phi: {lqf.phi}"
    assert lqf.phi_r is None and lqf.k is None, "Deterministic filter should have no phi_r"


@pytest.mark.parametrize("d", [[1.0], [1.0, -0.5], [1.0, -0.9, 0.2], [0.5, 1.0, 2.0, -1.0]])
@pytest.mark.parametrize("h", [0.0, 0.75])
def test_phi_properties(d, h):
    """phi is symmetric, of length 2m + 1, with h added to the centre."""
    m = len(d) - 1
    lqf = create_lq_filter(d, h, jnp.zeros(m))

    assert lqf.phi.shape == (2 * m + 1,), f"phi should be ({2 * m + 1},), got {lqf.phi.shape}"
    assert jnp.allclose(lqf.phi, lqf.phi[::-1]), "phi should be symmetric"

    d_arr = jnp.array(d)
    unweighted = autocovariance(d_arr)
    assert jnp.isclose(lqf.phi[m], unweighted[m] + h)
    assert jnp.allclose(jnp.delete(lqf.phi, m), jnp.delete(unweighted, m))

    # phi[m - i] = sum_j d_j d_{j+i}
    for i in range(m + 1):
        expected = jnp.sum(d_arr[:m + 1 - i] * d_arr[i:])
        assert jnp.isclose(unweighted[m - i], expected)


def test_discount_transform():
    """beta rescales d by beta^{j/2} and y_m by beta^{-i/2} before phi is formed."""
    beta = 0.5
    d = jnp.array([1.0, 2.0, 3.0])
    y_m = jnp.array([1.0, 1.0])
    lqf = create_lq_filter(d, 0.5, y_m, beta=beta)

    expected_d = jnp.array([1.0, 2.0 * jnp.sqrt(beta), 3.0 * beta])
    expected_y_m = jnp.array([beta ** -0.5, beta ** -1.0])

    assert lqf.beta == beta
    assert jnp.allclose(lqf.d, expected_d), f"Transformed d incorrect: {lqf.d}"
    assert jnp.allclose(lqf.y_m, expected_y_m), f"Transformed y_m incorrect: {lqf.y_m}"
    assert jnp.allclose(lqf.phi, autocovariance(expected_d).at[2].add(0.5))


def test_column_vectors_accepted():
    """Column vectors are flattened."""
    lqf = create_lq_filter(jnp.array([[1.0], [-0.5]]), 1.0, jnp.array([[2.0]]))

    assert lqf.d.shape == (2,)
    assert lqf.y_m.shape == (1,)
    assert jnp.allclose(lqf.y_m, jnp.array([2.0]))


def test_forcing_process():
    """r gives phi_r and k, h_eps is added to the centre."""
    lqf = create_lq_filter([1.0, -0.5], 1.0, [0.0], r=[1.0, 0.5])
    assert lqf.k == 1
    assert jnp.allclose(lqf.phi_r, jnp.array([0.5, 1.25, 0.5]))

    lqf = create_lq_filter([1.0, -0.5], 1.0, [0.0], r=[1.0, 0.5], h_eps=0.1)
    assert jnp.allclose(lqf.phi_r, jnp.array([0.5, 1.35, 0.5]))


@pytest.mark.parametrize(
    "d, y_m, r",
    [
        (jnp.ones((2, 2)), [0.0], None),              # d is a matrix
        ([1.0, 2.0], jnp.ones((1, 2, 2)), None),      # y_m is not a vector
        ([1.0, 2.0, 3.0], [0.0], None),               # len(y_m) != m
        ([], [], None),                               # empty d
        ([1.0, 2.0], [0.0], jnp.ones((2, 3))),        # r is a matrix
    ],
)
def test_shape_errors(d, y_m, r):
    with pytest.raises(ShapeError):
        create_lq_filter(d, 1.0, y_m, r=r)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"h": -1.0},
        {"h": 1.0, "beta": 0.0},
        {"h": 1.0, "beta": 1.5},
        {"h": 1.0, "r": [1.0], "h_eps": -0.5},
    ],
)
def test_argument_errors(kwargs):
    with pytest.raises(ArgumentError):
        create_lq_filter([1.0, 0.5], y_m=[0.0], **kwargs)


def test_immutable():
    lqf = create_lq_filter([1.0, 0.5], 1.0, [0.0])
    with pytest.raises(AttributeError):
        lqf.h = 2.0


def test_from_config():
    lqf = create_lq_filter_from_config(LQProblem())
    assert lqf.m == 1
    assert lqf.k == 1

    config = LQExperiment(d=(1.0, -0.5, 0.1), y_m=(0.0, 0.0), r=(1.0,), beta=0.9)
    lqf = create_lq_filter_from_config(config)
    assert lqf.m == 2
    assert lqf.k == 0
    assert lqf.beta == 0.9
