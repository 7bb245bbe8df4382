from .summary import plot_total_scores, summarize_scores

__all__ = [
    "summarize_scores",
    "plot_total_scores",
]
