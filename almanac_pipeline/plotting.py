from __future__ import annotations
from typing import List, Optional, Sequence, Tuple
import matplotlib.pyplot as plt

from .index_map import Interval

def _bars(ax, row: int, spans: List[Interval], alpha: float = 0.6):
    if not spans:
        return
    ax.broken_barh([(iv.start, iv.length()) for iv in spans], (row - 0.4, 0.8), alpha=alpha)

def plot_interval_flow(
    trace: Sequence[Tuple[str, List[Interval]]],
    title: str = "",
    show: bool = True,
    save_path: Optional[str] = None,
):
    """Plot the interval set after every stage, one row per stage (first stage on top)."""
    fig, ax = plt.subplots(figsize=(12, 1 + 0.5 * max(1, len(trace))))
    for row, (_, spans) in enumerate(trace):
        _bars(ax, row, spans)
    ax.set_yticks(range(len(trace)))
    ax.set_yticklabels([name for name, _ in trace], fontsize=8)
    ax.invert_yaxis()
    ax.set_title(title)
    ax.set_xlabel("Position")
    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    if show:
        plt.show()
    plt.close(fig)
