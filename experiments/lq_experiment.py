#!/usr/bin/env python3
"""
Multi-seed experiment runner for the combined control and prediction problem.

For every seed a forcing path a_0, ..., a_N is drawn from a_t = r(L) eps_t,
the perfect-foresight problem is solved, and the stochastic problem is solved
for each information time. The RMS gap between the two solutions measures the
value of information about future a_t.
"""

import tyro
from tqdm import tqdm

import jax
jax.config.update("jax_enable_x64", True)

from jax import random
from jax import numpy as jnp

from lqcontrol import create_lq_filter_from_config, optimal_y, simulate_a, solution, coeffs_of_c
from lqcontrol.config import LQExperiment

from common import WandbLogger, get_unique_identifier, plot_paths


def run_single_seed(config: LQExperiment, seed: int) -> dict:
    """Run a single seed experiment."""
    lqf = create_lq_filter_from_config(config)
    N = config.horizon

    logger = None
    if config.use_logger:
        experiment_name = f"{config.experiment_group}-seed-{seed}"
        if config.experiment_id is not None:
            experiment_name += f"-{config.experiment_id}"
        logger = WandbLogger(
            project_name=config.project_name,
            experiment_name=experiment_name,
            experiment_group=config.experiment_group,
            experiment_tags=config.experiment_tags,
            experiment_config={**config._asdict(), "seed": seed},
            logger_directory=config.logger_directory,
        )

    a_hist = simulate_a(lqf, N, random.PRNGKey(seed))
    y_perfect = optimal_y(lqf, a_hist).y_hist

    y_predicted = {}
    metrics = {}
    for t in config.info_times:
        y_hist = optimal_y(lqf, a_hist, t=t).y_hist
        y_predicted[t] = y_hist
        metrics[f"rms_gap/t={t}"] = float(jnp.sqrt(jnp.mean((y_hist - y_perfect) ** 2)))

    if logger is not None:
        logger.log_metrics(metrics)

    if config.plot:
        fig = plot_paths(a_hist, y_perfect, y_predicted, lqf.m, show=logger is None)
        if logger is not None:
            logger.log_figure("paths", fig)

    if logger is not None:
        logger.finish()

    return metrics


def main(config: LQExperiment):
    lqf = create_lq_filter_from_config(config)
    c_coeffs = coeffs_of_c(lqf)
    lambdas, A = solution(lqf)
    print(f"Spectral factor c: {c_coeffs}")
    print(f"Decay rates: {lambdas}, residues: {A}")

    if config.experiment_id is None:
        config = config._replace(experiment_id=get_unique_identifier().lstrip("-"))

    all_metrics = []
    for seed in tqdm(range(config.starting_seed, config.starting_seed + config.num_seeds), desc="Seeds"):
        all_metrics.append(run_single_seed(config, seed))

    for key in all_metrics[0]:
        values = jnp.array([metrics[key] for metrics in all_metrics])
        print(f"{key}: mean {jnp.mean(values):.4f}, std {jnp.std(values):.4f}")


if __name__ == "__main__":
    main(tyro.cli(LQExperiment))
