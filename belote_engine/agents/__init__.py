# belote_engine/agents/__init__.py
from .base import BeloteAgent
from .heuristic_agent import HeuristicAgent
from .random_agent import RandomBeloteAgent

__all__ = [
    "BeloteAgent",
    "HeuristicAgent",
    "RandomBeloteAgent",
]
