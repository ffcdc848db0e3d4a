import jax
jax.config.update("jax_enable_x64", True)

import matplotlib.pyplot as plt
from jax import random, numpy as jnp

from lqcontrol import (
    create_lq_filter,
    coeffs_of_c,
    factorize,
    optimal_y,
    simulate_a,
    solution,
)


def deterministic_example(N: int = 40):
    """Compare discounted and undiscounted responses to a step in a_t.

    Args:
        N: Horizon

    Returns:
        Trajectories (N + m + 1,) for beta = 1 and beta = 0.9
    """
    d = jnp.array([1.0, -0.8])
    y_m = jnp.array([2.0])
    a_hist = jnp.where(jnp.arange(N + 1) < N // 2, 0.0, 1.0)

    undiscounted = create_lq_filter(d, 0.5, y_m)
    discounted = create_lq_filter(d, 0.5, y_m, beta=0.9)

    # Closed-form decay of the homogeneous solution
    roots = factorize(undiscounted)
    lambdas, A = solution(undiscounted)
    print(f"z_1..z_m = {roots.z_1_to_m}, z_0 = {roots.z_0}")
    print(f"c(z) coefficients = {coeffs_of_c(undiscounted)}")
    print(f"lambdas = {lambdas}, A = {A}")

    y_undiscounted = optimal_y(undiscounted, a_hist).y_hist
    y_discounted = optimal_y(discounted, a_hist).y_hist
    return a_hist, y_undiscounted, y_discounted


def stochastic_example(N: int = 40, seed: int = 42):
    """Solve the control problem under different information sets.

    Args:
        N: Horizon
        seed: Random seed for the forcing path

    Returns:
        Forcing path and a dictionary of trajectories keyed by information time
    """
    lqf = create_lq_filter([1.0, -0.8], 0.5, [0.0], r=[1.0, 0.7, 0.3])
    a_hist = simulate_a(lqf, N, random.PRNGKey(seed))

    paths = {"perfect foresight": optimal_y(lqf, a_hist).y_hist}
    for t in [0, N // 4, N // 2]:
        paths[f"t = {t}"] = optimal_y(lqf, a_hist, t=t).y_hist
    return a_hist, paths


def main():
    N = 40
    a_hist, y_undiscounted, y_discounted = deterministic_example(N)
    a_sim, paths = stochastic_example(N)

    fig, axs = plt.subplots(2, 1, figsize=(10, 8))

    axs[0].plot(range(-1, N + 1), y_undiscounted, label="beta = 1")
    axs[0].plot(range(-1, N + 1), y_discounted, label="beta = 0.9")
    axs[0].plot(range(N + 1), a_hist, "k:", label="a_t")
    axs[0].set_title("Deterministic problem")
    axs[0].grid(True)
    axs[0].legend()

    for label, y_hist in paths.items():
        axs[1].plot(range(-1, N + 1), y_hist, label=label)
    axs[1].plot(range(N + 1), a_sim, "k:", alpha=0.5, label="a_t")
    axs[1].set_title("Combined control and prediction")
    axs[1].set_xlabel("Time")
    axs[1].grid(True)
    axs[1].legend()

    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
