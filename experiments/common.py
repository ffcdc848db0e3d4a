import time
import uuid
from typing import Dict, Any, Optional, List

from jax import Array
import matplotlib.pyplot as plt
import wandb


def get_unique_identifier() -> str:
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    unique_id = str(uuid.uuid4())[:8]
    return f"-{timestamp}-{unique_id}"


def plot_paths(
    a_hist: Array,
    y_perfect: Array,
    y_predicted: Dict[int, Array],
    m: int,
    show: bool = True,
):
    """Plots the forcing sequence and the optimal paths for each information time.

    Args:
        a_hist: Forcing sequence a_0, ..., a_N
        y_perfect: Perfect-foresight trajectory y_{-m}, ..., y_N
        y_predicted: Trajectories keyed by the information time t
        m: Number of initial conditions
        show: Whether to call plt.show()

    Returns:
        The matplotlib figure
    """
    fig, axs = plt.subplots(2, 1, figsize=(10, 8), sharex=True)
    fig.suptitle("Optimal paths under different information sets")

    time_idx = range(-m, len(a_hist))
    axs[0].plot(range(len(a_hist)), a_hist, "k-")
    axs[0].set_ylabel("a_t")
    axs[0].grid(True)

    axs[1].plot(time_idx, y_perfect, "k--", linewidth=2, label="Perfect foresight")
    for t, y_hist in y_predicted.items():
        axs[1].plot(time_idx, y_hist, label=f"Information at t = {t}")
        axs[1].axvline(x=t, color="gray", linestyle=":", alpha=0.5)
    axs[1].set_ylabel("y_t")
    axs[1].set_xlabel("Time")
    axs[1].grid(True)
    axs[1].legend()

    plt.tight_layout()
    if show:
        plt.show()
    return fig


class WandbLogger:
    def __init__(
        self,
        project_name: str,
        experiment_name: str,
        experiment_group: Optional[str] = None,
        experiment_tags: Optional[List[str]] = None,
        experiment_config: Optional[Dict[str, Any]] = None,
        logger_directory: str = "logs"
    ):
        """Initialize the Weights & Biases run of one seed.

        Args:
            project_name: Name of the Weights & Biases project
            experiment_name: Name of the experiment
            experiment_group: Optional group name for organizing experiments
            experiment_tags: Optional list of tags for the experiment
            experiment_config: Optional dictionary of configuration parameters
            logger_directory: Directory to store logs
        """
        init_kwargs = {
            "project": project_name,
            "name": experiment_name,
            "dir": logger_directory,
            "group": experiment_group,
            "tags": experiment_tags,
            "config": experiment_config,
        }
        self.wandb_run = wandb.init(**{k: v for k, v in init_kwargs.items() if v is not None})

    def log_metrics(self, metrics: Dict[str, Any], step: Optional[int] = None):
        """Log scalar metrics, e.g. the RMS gap per information time."""
        self.wandb_run.log(metrics, step=step)

    def log_figure(self, name: str, fig):
        """Log a matplotlib figure as an image."""
        self.wandb_run.log({name: wandb.Image(fig)})

    def finish(self):
        self.wandb_run.finish()
