"""dice_battler -- a turn-based dice combat engine with campaigns and simulation."""
