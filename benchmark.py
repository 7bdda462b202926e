#!/usr/bin/env python3
"""
Benchmark for Mahjongg Solitaire agents

Plays many games per deal policy and reports how often each agent
clears the board.

Agents tested (both play through the Gymnasium environment):
1. Heuristic - rule-based pair picker
2. Random - uniform valid actions

Usage:
    python benchmark.py --games 50 --layout pyramid
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List
from dataclasses import dataclass, field

import numpy as np

sys.path.insert(0, str(Path(__file__).parent))

from mahjongg.layout import available_layouts
from mahjongg.deal import DEAL_POLICIES
from mahjongg.session import SessionState
from agents.heuristic_agent import HeuristicAgent
from agents.random_agent import RandomAgent
from envs.solitaire_env import MahjonggSolitaireEnv

logger = logging.getLogger(__name__)


@dataclass
class BenchmarkResult:
    """Results of one agent on one deal policy."""
    agent: str
    policy: str
    games: int = 0
    wins: int = 0
    stuck: int = 0
    tiles_left: List[int] = field(default_factory=list)

    @property
    def win_rate(self) -> float:
        return self.wins / self.games if self.games else 0.0

    @property
    def mean_tiles_left(self) -> float:
        return float(np.mean(self.tiles_left)) if self.tiles_left else 0.0


def run_agent(agent_name: str, layout: str, policy: str, games: int, seed: int) -> BenchmarkResult:
    """Play games with one agent through the environment."""
    result = BenchmarkResult(agent=agent_name, policy=policy)
    env = MahjonggSolitaireEnv(layout_name=layout, deal_policy=policy, seed=seed)
    if agent_name == "heuristic":
        agent = HeuristicAgent(env.layout)
    else:
        agent = RandomAgent(seed=seed)

    for game in range(games):
        obs, info = env.reset(seed=seed + game)
        agent.reset()
        while True:
            obs, reward, terminated, truncated, info = env.step(agent.act(obs))
            if terminated or truncated:
                break
        result.games += 1
        result.wins += info["state"] == SessionState.WON.name
        result.stuck += info["state"] == SessionState.STUCK.name
        result.tiles_left.append(info["tiles_remaining"])
        logger.debug(f"{agent_name}/{policy} game {game + 1}: {info['state']}")

    env.close()
    return result


def print_report(results: List[BenchmarkResult]) -> None:
    """Print a summary table."""
    print("\n" + "=" * 70)
    print("🀄 MAHJONGG SOLITAIRE BENCHMARK")
    print("=" * 70)
    print(f"{'Agent':<12}{'Policy':<10}{'Games':>7}{'Wins':>7}{'Stuck':>7}{'Win %':>9}{'Tiles left':>12}")
    for r in results:
        print(
            f"{r.agent:<12}{r.policy:<10}{r.games:>7}{r.wins:>7}{r.stuck:>7}"
            f"{r.win_rate * 100:>8.1f}%{r.mean_tiles_left:>12.1f}"
        )
    print("=" * 70)


def main():
    parser = argparse.ArgumentParser(description="Benchmark Mahjongg solitaire agents")
    parser.add_argument("--games", type=int, default=20, help="Games per agent and policy")
    parser.add_argument("--layout", type=str, default="pyramid", choices=available_layouts())
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--skip-random", action="store_true", help="Only run the heuristic agent")
    parser.add_argument("--verbose", action="store_true")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    results: List[BenchmarkResult] = []
    for policy in DEAL_POLICIES:
        results.append(run_agent("heuristic", args.layout, policy, args.games, args.seed))
        if not args.skip_random:
            results.append(run_agent("random", args.layout, policy, args.games, args.seed))

    print_report(results)


if __name__ == "__main__":
    main()
