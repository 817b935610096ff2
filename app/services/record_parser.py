"""Fighter record parsing.

Schedules list a fighter's career record as free text, "wins-losses-draws":

    "19-4-1"  -> 19 wins, 4 losses, 1 draw
    "5-0"     -> 5 wins, 0 losses, 0 draws
    ""        -> 0-0-0
"""
import re
from dataclasses import dataclass
from typing import Optional

# Leading integer of a segment; anything after it is ignored ("12 (1 NC)" -> 12)
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class FighterTally:
    wins: int = 0
    losses: int = 0
    draws: int = 0

    def as_record(self) -> str:
        return f"{self.wins}-{self.losses}-{self.draws}"


def _segment_value(segment: str) -> int:
    match = _LEADING_INT.match(segment)
    return int(match.group(1)) if match else 0


def parse_record(record: Optional[str]) -> FighterTally:
    """
    Parse a "W-L-D" record string into a tally.

    Missing or unreadable segments count as 0; this never raises.

    Examples:
        >>> parse_record("19-4-1")
        FighterTally(wins=19, losses=4, draws=1)
        >>> parse_record("abc-def")
        FighterTally(wins=0, losses=0, draws=0)
    """
    if not record:
        return FighterTally()

    parts = record.split("-")
    values = [_segment_value(part) for part in parts[:3]]
    values += [0] * (3 - len(values))
    return FighterTally(wins=values[0], losses=values[1], draws=values[2])
