"""Classification of free-text bout outcomes into bet types.

Results feeds describe the method of victory as text, e.g.:

    "KO/TKO, 0:51 R2"  -> KO/TKO, round 2, 0:51
    "Split Dec"        -> Split Decision
    "Unanimous Dec"    -> Unanimous Decision

Rules are checked in order; the first match wins. Text matching no rule
falls back to "Decision".
"""
import re
from dataclasses import dataclass
from typing import Optional

KO_TKO = "KO/TKO"
DECISION = "Decision"
SPLIT_DECISION = "Split Decision"
UNANIMOUS_DECISION = "Unanimous Decision"

# "0:51 R2" -> minutes, seconds, round
_CLOCK_AND_ROUND = re.compile(r"(\d+):(\d+)\s*R(\d+)")


@dataclass(frozen=True)
class ResultClassification:
    bet_type: str = DECISION
    round: int = 0
    time: str = ""


def classify_result(result_text: Optional[str]) -> ResultClassification:
    """
    Classify a result description.

    Returns:
        ResultClassification with the bet type name, the finishing round
        (0 when unknown) and the clock time ("" when unknown). Never raises.
    """
    if not result_text:
        return ResultClassification()

    if KO_TKO in result_text:
        match = _CLOCK_AND_ROUND.search(result_text)
        if match:
            minutes, seconds, round_no = match.groups()
            return ResultClassification(KO_TKO, int(round_no), f"{minutes}:{seconds}")
        return ResultClassification(KO_TKO)

    if "Dec" in result_text:
        if "Split" in result_text:
            return ResultClassification(SPLIT_DECISION)
        if "Unanimous" in result_text:
            return ResultClassification(UNANIMOUS_DECISION)
        return ResultClassification(DECISION)

    # Anything else, submissions and draws included, counts as a decision
    return ResultClassification()
