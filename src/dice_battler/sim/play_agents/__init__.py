"""Play agent implementations for headless battle simulation.

Re-exports the base class and all concrete agent implementations so
consumers can do::

    from dice_battler.sim.play_agents import PlayAgent, RandomAgent
"""

from .base import PlayAgent
from .heuristic_agent import HeuristicAgent
from .random_agent import RandomAgent

__all__ = ["PlayAgent", "HeuristicAgent", "RandomAgent"]
