"""Recovery between campaign battles."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from dice_battler.sim.core.entities import Player


class Recovery(BaseModel):
    stamina_restored: int
    luck_restored: int


def calculate_recovery(player: Player, stamina_lost: int | None = None) -> Recovery:
    """Work out what the player regains before the next battle.

    Half the stamina lost (rounded down) and a single point of luck if
    luck is below max.

    Parameters
    ----------
    player:
        The player after the battle.
    stamina_lost:
        Stamina lost in the battle just finished.  Defaults to the
        player's current deficit (``max_stamina - current_stamina``).
    """
    if stamina_lost is None:
        stamina_lost = player.max_stamina - player.current_stamina
    stamina_restored = max(0, stamina_lost) // 2
    luck_restored = 1 if player.luck < player.max_luck else 0
    return Recovery(stamina_restored=stamina_restored, luck_restored=luck_restored)


def apply_recovery(player: Player, recovery: Recovery) -> Recovery:
    """Apply *recovery* (clamped) and return what was actually restored."""
    return Recovery(
        stamina_restored=player.heal(recovery.stamina_restored),
        luck_restored=player.restore_luck(recovery.luck_restored),
    )
