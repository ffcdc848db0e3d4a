"""Classical discrete-time LQ optimal control and filtering.

This package solves scalar control problems of the form

    max sum_{t=0}^{N} beta^t {a_t y_t - h y_t^2 / 2 - [d(L) y_t]^2 / 2}

over a finite horizon with a pivoted LU factorization of the Euler equations,
factors the associated autocovariance-generating function, and forecasts the
forcing sequence with a Cholesky-whitening predictor.
"""

from .core import (
    LQFilter,
    OptimalPath,
    CharacteristicRoots,
    DecayRepresentation,
    DeterministicRequest,
    StochasticRequest,
)
from .errors import (
    LQFilterError,
    ShapeError,
    DimensionError,
    ArgumentError,
    FactorizationError,
    SingularSystemError,
    NonPositiveDefiniteError,
)
from .filter import autocovariance, create_lq_filter, create_lq_filter_from_config
from .matrices import construct_W_and_Wm
from .spectral import roots_of_characteristic, coeffs_of_c, solution, factorize
from .prediction import construct_V, simulate_a, predict, covariance, simulate
from .solver import optimal_y, solve_request, solve

__all__ = [
    'LQFilter',
    'OptimalPath',
    'CharacteristicRoots',
    'DecayRepresentation',
    'DeterministicRequest',
    'StochasticRequest',
    'LQFilterError',
    'ShapeError',
    'DimensionError',
    'ArgumentError',
    'FactorizationError',
    'SingularSystemError',
    'NonPositiveDefiniteError',
    'autocovariance',
    'create_lq_filter',
    'create_lq_filter_from_config',
    'construct_W_and_Wm',
    'roots_of_characteristic',
    'coeffs_of_c',
    'solution',
    'factorize',
    'construct_V',
    'simulate_a',
    'predict',
    'covariance',
    'simulate',
    'optimal_y',
    'solve_request',
    'solve',
]
