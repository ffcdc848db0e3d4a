from typing import List, Optional, NamedTuple


class LQProblem(NamedTuple):
    # Cost: a_t y_t - h y_t^2 / 2 - [d(L) y_t]^2 / 2
    d: tuple[float, ...] = (1.0, -0.9)
    h: float = 1.0
    y_m: tuple[float, ...] = (0.0,)

    # forcing process a_t = r(L) eps_t, None for a deterministic problem
    r: Optional[tuple[float, ...]] = (1.0, 0.5)
    h_eps: Optional[float] = None

    # discount factor, None for an undiscounted problem
    beta: Optional[float] = None


class LQExperiment(NamedTuple):
    # Problem settings
    d: tuple[float, ...] = (1.0, -0.9)
    h: float = 1.0
    y_m: tuple[float, ...] = (0.0,)
    r: tuple[float, ...] = (1.0, 0.5)
    h_eps: Optional[float] = None
    beta: Optional[float] = None

    # Horizon and information sets
    horizon: int = 50
    info_times: tuple[int, ...] = (0, 10, 25)

    # Seeds
    num_seeds: int = 10
    starting_seed: int = 0

    # Output settings
    plot: bool = False

    # Logger settings
    use_logger: bool = False
    project_name: str = "lq-control"
    experiment_group: str = "prediction"
    experiment_tags: Optional[List[str]] = ["lq", "prediction"]
    experiment_id: Optional[str] = None
    logger_directory: str = "logs"
