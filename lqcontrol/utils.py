import operator
from typing import Type

from jax import Array, numpy as jnp

from lqcontrol.errors import ArgumentError, ShapeError


def as_vector(x, name: str, error: Type[Exception] = ShapeError) -> Array:
    """
    Converts a sequence, 1-D array or column/row vector into a flat float array.

    Args:
        x: Input values.
        name (str): Name used in the error message.
        error (Type[Exception]): Exception raised when ``x`` has more than one
            dimension of size greater than one.

    Returns:
        Array: Flat array of shape (n,).
    """
    arr = jnp.asarray(x, dtype=jnp.result_type(float))
    free_dims = [size for size in arr.shape if size > 1]
    if len(free_dims) > 1:
        raise error(f"{name} must be a vector or a column vector, got shape {arr.shape}")
    return arr.reshape(-1)


def as_integer(value, name: str) -> int:
    """Returns ``value`` as a Python int, raising ``ArgumentError`` otherwise."""
    if isinstance(value, bool):
        raise ArgumentError(f"{name} must be an integer, got {value!r}")
    try:
        return operator.index(value)
    except TypeError:
        raise ArgumentError(f"{name} must be an integer, got {value!r}") from None


def discount_weights(beta: float, exponents: Array) -> Array:
    """Returns beta^(exponents / 2), the scaling of the discount transform."""
    return beta ** (jnp.asarray(exponents, dtype=jnp.result_type(float)) / 2)
