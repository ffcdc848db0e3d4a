"""Spectral factorization of the autocovariance-generating function.

Writes z^m phi(z) = z_0 (z - z_1) ... (z - z_2m) and factors

    phi(z) = c(z) c(1/z),    c(z) = c_0 (1 - lambda_1 z) ... (1 - lambda_m z),

where z_1, ..., z_m are the roots outside the unit circle and
lambda_j = 1 / z_j. Since ``phi`` is symmetric the polynomial is
self-reciprocal and its roots come in pairs (z, 1/z).
"""

import logging

from jax import Array, numpy as jnp

from lqcontrol.core import CharacteristicRoots, DecayRepresentation, LQFilter
from lqcontrol.errors import FactorizationError

logger = logging.getLogger(__name__)


def _tolerance(x: Array, power: float = 0.5) -> float:
    return float(jnp.finfo(x.dtype).eps ** power)


def roots_of_characteristic(lqf: LQFilter) -> CharacteristicRoots:
    """
    Calculates z_0 and the m roots of the characteristic equation outside the unit circle.

    Args:
        lqf (LQFilter): Problem parameters.

    Returns:
        CharacteristicRoots: Roots z_1, ..., z_m sorted by descending modulus,
            the constant z_0 and lambdas = 1 / z_i.

    Raises:
        FactorizationError: If the polynomial has fewer than 2m roots, its
            roots are not finite, or they do not split into m roots outside
            and m roots inside the unit circle.
    """
    m, phi = lqf.m, lqf.phi

    if not jnp.allclose(phi, phi[::-1]):
        raise FactorizationError("phi must be symmetric around its centre")

    # Roots of the 2m-polynomial
    proots = jnp.roots(phi[::-1])
    if proots.shape[0] != 2 * m:
        raise FactorizationError(
            f"Characteristic polynomial has {proots.shape[0]} roots instead of {2 * m}; "
            "d_0 and d_m must be non-zero"
        )
    if not jnp.all(jnp.isfinite(proots)):
        raise FactorizationError("Root finding did not converge")

    # Sort the roots according to their modulus (in descending order)
    roots_sorted = proots[jnp.argsort(-jnp.abs(proots))]
    z_1_to_m = roots_sorted[:m]

    # Self-reciprocal polynomial: the top m roots lie outside the unit circle
    tol = _tolerance(phi)
    if m > 0 and not (jnp.all(jnp.abs(z_1_to_m) > 1 + tol) and jnp.all(jnp.abs(roots_sorted[m:]) < 1 - tol)):
        raise FactorizationError(
            "Characteristic roots do not split around the unit circle; "
            f"moduli are {jnp.abs(roots_sorted)}"
        )

    # (z - z_1) ... (z - z_2m) evaluated at z = 1
    z_0 = jnp.sum(phi) / jnp.prod(1.0 - proots)
    lambdas = 1 / z_1_to_m

    logger.debug("Characteristic roots outside the unit circle: %s", z_1_to_m)
    return CharacteristicRoots(z_1_to_m=z_1_to_m, z_0=z_0, lambdas=lambdas)


def coeffs_of_c(lqf: LQFilter) -> Array:
    """
    Computes the coefficients of c(z) = sum_{j=0}^{m} c_j z^j.

    The order is [c_0, c_1, ..., c_m], where c_0 = sqrt(z_0 z_1 ... z_m (-1)^m).

    Args:
        lqf (LQFilter): Problem parameters.

    Returns:
        Array: Real coefficients of shape (m + 1,).

    Raises:
        FactorizationError: If c_0^2 is not real and positive.
    """
    z_1_to_m, z_0, _ = roots_of_characteristic(lqf)
    m = lqf.m

    radicand = z_0 * jnp.prod(z_1_to_m) * (-1.0) ** m
    tol = _tolerance(lqf.phi)
    if jnp.abs(radicand.imag) > tol * jnp.abs(radicand) or radicand.real <= 0:
        raise FactorizationError(
            f"c_0^2 = {radicand} is not positive; phi is not a valid autocovariance sequence"
        )
    c_0 = jnp.sqrt(radicand.real)

    # z_0 (z - z_1) ... (z - z_m) / c_0 in ascending powers of z
    monic = jnp.atleast_1d(jnp.poly(z_1_to_m))[::-1]
    c_coeffs = (monic * z_0).real / c_0
    return c_coeffs


def solution(lqf: LQFilter) -> DecayRepresentation:
    """
    Calculates {lambda_j} and {A_j} of the partial fractions

        1 / [c(z) c(1/z)] = sum_j A_j / (1 - lambda_j z) + ...

    with A_j = c_0^{-2} / prod_{i != j} (1 - lambda_i / lambda_j).

    Args:
        lqf (LQFilter): Problem parameters.

    Returns:
        DecayRepresentation: Decay rates ``lambdas`` and residues ``A``.

    Raises:
        FactorizationError: If two decay rates coincide.
    """
    _, _, lambdas = roots_of_characteristic(lqf)
    c_0 = coeffs_of_c(lqf)[0]
    m = lqf.m

    gaps = jnp.abs(lambdas[:, None] - lambdas[None, :]) + jnp.eye(m)
    if m > 1 and jnp.min(gaps) <= _tolerance(lqf.phi, 0.25) * jnp.max(jnp.abs(lambdas)):
        raise FactorizationError(f"Decay rates are not distinct: {lambdas}")

    A = jnp.zeros(m, dtype=lambdas.dtype)
    for j in range(m):
        denom = 1 - lambdas / lambdas[j]
        A = A.at[j].set(c_0 ** (-2) / jnp.prod(jnp.delete(denom, j)))

    return DecayRepresentation(lambdas=lambdas, A=A)


factorize = roots_of_characteristic
