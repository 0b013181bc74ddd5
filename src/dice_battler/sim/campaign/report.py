"""Plain-text end-of-campaign summary for terminal front ends."""

from __future__ import annotations

from dice_battler.sim.campaign.state import CampaignState


def generate_campaign_report(campaign: CampaignState) -> str:
    """Generate a human-readable summary of a campaign."""
    s = campaign.starting_stats
    lines: list[str] = []

    lines.append("=" * 60)
    status = "in progress" if campaign.is_active else "ended"
    lines.append(f"Campaign Report ({status})")
    lines.append(
        f"Starting stats: SKILL {s.skill} | STAMINA {s.stamina} | LUCK {s.luck}"
        + (f" | MANA {s.mana}" if s.mana else "")
    )
    lines.append("=" * 60)

    lines.append("")
    lines.append("## Totals")
    lines.append(f"  Final score:       {campaign.score:,}")
    lines.append(f"  Battles won:       {campaign.battles_won}/{campaign.battles_fought}")
    lines.append(f"  Perfect victories: {campaign.perfect_victories}")
    lines.append(f"  Damage dealt:      {campaign.total_damage_dealt}")
    lines.append(f"  Damage taken:      {campaign.total_damage_taken}")
    lines.append(f"  Current streak:    {campaign.current_streak}")

    if campaign.battle_history:
        lines.append("")
        lines.append("## Battles")
        for record in campaign.battle_history:
            outcome = "WIN " if record.victory else "LOSS"
            lines.append(
                f"  #{record.battle_number:<3d} {outcome} {record.creature_name:24s}"
                f"  rounds={record.rounds_completed:<3d}"
                f"  dealt={record.damage_dealt:<3d}"
                f"  taken={record.damage_taken:<3d}"
                f"  score={record.score:,}"
            )

    lines.append("")
    return "\n".join(lines)
