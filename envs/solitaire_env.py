"""
Mahjongg Solitaire Gymnasium Environment

A Gymnasium-compatible environment for training agents to clear
Mahjongg solitaire boards.
"""

import gymnasium as gym
from gymnasium import spaces
import numpy as np
from typing import Optional, Tuple, Dict, Any

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mahjongg.tiles import TileSet
from mahjongg.config import GameConfig
from mahjongg.session import GameSession, SessionState, SelectionOutcome


class MahjonggSolitaireEnv(gym.Env):
    """
    Mahjongg Solitaire Environment.

    The agent clicks tiles one at a time: an action selects the tile at
    one board position, and every second selection is a match attempt.

    Observation Space:
        A dictionary containing:
        - tiles: (L, R, C) int8 - Tile face index per slot, -1 if empty
        - exposed: (L, R, C) int8 - 1 where a tile can be selected
        - selected: (L, R, C) int8 - 1 on the currently chosen tile
        - valid_actions: (N,) int8 - Binary mask of useful selections
        - game_info: (4,) float32 - [tiles_remaining, moves, state, pairs_available]

    Action Space:
        Discrete(N), N = number of positions in the layout. Action i
        selects layout.position_at(i).
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 1}

    # Rewards
    REWARD_PAIR = 1.0
    REWARD_WIN = 10.0
    REWARD_STUCK = -5.0
    REWARD_INVALID = -0.1

    def __init__(
        self,
        layout_name: str = "pyramid",
        deal_policy: str = "solvable",
        seed: Optional[int] = None,
        render_mode: Optional[str] = None,
        auto_shuffle: bool = False,
        max_steps: int = 1000,
    ):
        """
        Initialize the environment.

        Args:
            layout_name: Registered board layout
            deal_policy: "random" or "solvable"
            seed: Random seed for reproducibility
            render_mode: Rendering mode ("human" or "ansi")
            auto_shuffle: Reshuffle instead of terminating when stuck
            max_steps: Episode length limit
        """
        super().__init__()

        self.render_mode = render_mode
        self.max_steps = max_steps
        self.config = GameConfig(
            layout_name=layout_name,
            deal_policy=deal_policy,
            seed=seed,
            auto_shuffle=auto_shuffle,
        )
        self.session = GameSession(self.config)
        self.layout = self.session.layout
        num_positions = len(self.layout)
        shape = self.layout.shape

        self.observation_space = spaces.Dict({
            "tiles": spaces.Box(low=-1, high=TileSet.NUM_TILE_TYPES - 1, shape=shape, dtype=np.int8),
            "exposed": spaces.Box(low=0, high=1, shape=shape, dtype=np.int8),
            "selected": spaces.Box(low=0, high=1, shape=shape, dtype=np.int8),
            "valid_actions": spaces.Box(low=0, high=1, shape=(num_positions,), dtype=np.int8),
            "game_info": spaces.Box(low=0, high=TileSet.NUM_TILES * 10, shape=(4,), dtype=np.float32),
        })
        self.action_space = spaces.Discrete(num_positions)

        self._episode_reward = 0.0
        self._episode_length = 0

    def reset(
        self,
        seed: Optional[int] = None,
        options: Optional[Dict] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict]:
        """
        Reset the environment to start a new game.

        Args:
            seed: Random seed (reseeds the deal generator)
            options: Additional options (unused)

        Returns:
            Tuple of (observation, info)
        """
        super().reset(seed=seed)

        if seed is not None:
            self.session.dealer.reset(seed)
        self.session.restart()

        self._episode_reward = 0.0
        self._episode_length = 0

        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict]:
        """
        Select the tile at the position with index action.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        self._episode_length += 1
        position = self.layout.position_at(int(action))
        result = self.session.select(position)

        if result.outcome == SelectionOutcome.WON:
            reward = self.REWARD_PAIR + self.REWARD_WIN
        elif result.outcome == SelectionOutcome.STUCK:
            reward = self.REWARD_PAIR + self.REWARD_STUCK
        elif result.outcome == SelectionOutcome.MATCH_SUCCESS:
            reward = self.REWARD_PAIR
        elif result.outcome in (SelectionOutcome.MATCH_FAILURE, SelectionOutcome.ILLEGAL_SELECTION):
            reward = self.REWARD_INVALID
        else:
            reward = 0.0

        self._episode_reward += reward
        terminated = self.session.is_over
        truncated = not terminated and self._episode_length >= self.max_steps

        obs = self._get_observation()
        info = self._get_info()
        info["outcome"] = result.outcome.name

        if terminated or truncated:
            info["episode"] = {
                "r": self._episode_reward,
                "l": self._episode_length,
                "won": self.session.state == SessionState.WON,
            }

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), bool(terminated), bool(truncated), info

    def _get_observation(self) -> Dict[str, np.ndarray]:
        """Get current observation for the agent."""
        board = self.session.board

        selected = np.zeros(self.layout.shape, dtype=np.int8)
        if self.session.selected is not None:
            p = self.session.selected
            selected[p.layer, p.row, p.col] = 1

        game_info = np.array([
            board.occupied_count,
            self.session.moves,
            self.session.state.value,
            len(self.session.available_pairs()),
        ], dtype=np.float32)

        return {
            "tiles": board.to_index_grid(),
            "exposed": board.exposed_mask().astype(np.int8),
            "selected": selected,
            "valid_actions": self._get_valid_actions_mask(),
            "game_info": game_info,
        }

    def _get_valid_actions_mask(self) -> np.ndarray:
        """
        Get binary mask of useful selections: any exposed tile when
        nothing is chosen, otherwise the chosen tile (to deselect) and
        the exposed tiles that match it.
        """
        mask = np.zeros(len(self.layout), dtype=np.int8)
        if self.session.is_over:
            return mask

        board = self.session.board
        chosen = self.session.selected
        for p in board.exposed_positions():
            if chosen is None or p == chosen or board.occupant(p).matches(board.occupant(chosen)):
                mask[self.layout.index_of(p)] = 1
        return mask

    def _get_info(self) -> Dict[str, Any]:
        """Get additional info."""
        return {
            "state": self.session.state.name,
            "tiles_remaining": self.session.board.occupied_count,
            "moves": self.session.moves,
            "shuffles_used": self.session.shuffles_used,
        }

    def render(self):
        """Render the current board."""
        text = self._render_text()
        if self.render_mode == "ansi":
            return text
        if self.render_mode == "human":
            print(text)
        return None

    def _render_text(self) -> str:
        lines = [
            "=" * 50,
            f"Layout: {self.layout.name} | State: {self.session.state.name} | "
            f"Tiles: {self.session.board.occupied_count} | Moves: {self.session.moves}",
            "=" * 50,
            str(self.session.board),
        ]
        if self.session.selected is not None:
            lines.append(f"Selected: {self.session.selected}")
        return "\n".join(lines)

    def close(self):
        """Clean up resources."""
        pass


# Register the environment
def register_envs():
    """Register Mahjongg solitaire environments with Gymnasium."""
    gym.register(
        id="MahjonggSolitaire-v0",
        entry_point="envs.solitaire_env:MahjonggSolitaireEnv",
        max_episode_steps=1000,
    )


if __name__ == "__main__":
    # Quick test
    env = MahjonggSolitaireEnv(layout_name="tower", render_mode="human")
    obs, info = env.reset(seed=0)

    print("Observation keys:", obs.keys())
    print("Tiles shape:", obs["tiles"].shape)
    print("Valid actions:", np.sum(obs["valid_actions"]), "available")

    for _ in range(10):
        valid_indices = np.where(obs["valid_actions"] == 1)[0]
        if len(valid_indices) == 0:
            print("No valid actions!")
            break
        action = np.random.choice(valid_indices)
        obs, reward, terminated, truncated, info = env.step(action)
        print(f"Action: {action}, Reward: {reward}, Outcome: {info['outcome']}")
        if terminated or truncated:
            print("Game ended!")
            break

    env.close()
