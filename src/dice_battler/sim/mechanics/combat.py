"""Combat resolution -- compare attack strengths and name the side that is hit.

The result tag names the side that *received* damage, not the side that
rolled higher::

    player 15 vs creature 10  ->  CREATURE_HIT   (the player dealt the hit)
    player 8  vs creature 11  ->  PLAYER_HIT
    equal                     ->  DRAW           (no damage)
"""

from __future__ import annotations

from dice_battler.sim.core.game_state import CombatResult

# Damage of a standard hit.  A design constant, independent of the margin.
STANDARD_DAMAGE = 2


def determine_combat_result(player_strength: int, creature_strength: int) -> CombatResult:
    """Higher strength wins; the *other* side is marked as hit."""
    if player_strength > creature_strength:
        return CombatResult.CREATURE_HIT
    if creature_strength > player_strength:
        return CombatResult.PLAYER_HIT
    return CombatResult.DRAW

