"""
Mahjongg Solitaire Agents
"""

from .random_agent import RandomAgent
from .heuristic_agent import HeuristicAgent

__all__ = [
    "RandomAgent",
    "HeuristicAgent",
]
