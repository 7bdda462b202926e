"""
Mahjongg Solitaire Gymnasium Environments
"""

from .solitaire_env import MahjonggSolitaireEnv, register_envs

__all__ = ["MahjonggSolitaireEnv", "register_envs"]
