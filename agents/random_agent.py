"""
Random Agent for Mahjongg Solitaire

A simple baseline agent that takes random valid actions.
"""

import numpy as np
from typing import Dict


class RandomAgent:
    """
    Random agent that selects uniformly from valid actions.

    This serves as a baseline for comparison with smarter agents.
    """

    def __init__(self, seed: int = None):
        """
        Initialize the random agent.

        Args:
            seed: Random seed for reproducibility
        """
        self.rng = np.random.default_rng(seed)

    def act(self, observation: Dict[str, np.ndarray]) -> int:
        """
        Select an action given the current observation.

        Args:
            observation: Dictionary observation from the environment

        Returns:
            Action index (0 if nothing is selectable)
        """
        valid_actions = observation["valid_actions"]
        valid_indices = np.where(valid_actions == 1)[0]

        if len(valid_indices) == 0:
            return 0

        return int(self.rng.choice(valid_indices))

    def predict(self, observation: Dict[str, np.ndarray], deterministic: bool = True):
        """
        Predict action (stable-baselines style interface).

        Args:
            observation: Dictionary observation
            deterministic: Ignored for the random agent

        Returns:
            Tuple of (action, state)
        """
        return self.act(observation), None

    def reset(self):
        """Reset the agent state (no-op for random agent)."""
        pass

    def __repr__(self) -> str:
        return "RandomAgent()"
