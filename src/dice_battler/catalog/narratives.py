"""Battle narratives -- story text shown before and after a creature fight."""

from __future__ import annotations

from pydantic import BaseModel


class BattleNarrative(BaseModel):
    creature_id: str
    intro: str
    victory_text: str
    defeat_text: str
