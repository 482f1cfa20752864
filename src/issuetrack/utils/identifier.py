"""Team and issue identifier helpers."""
import re
from typing import Optional, Tuple

TEAM_IDENTIFIER_RE = re.compile(r"[A-Z]{2,5}")
ISSUE_IDENTIFIER_RE = re.compile(r"([A-Z]{2,5})-([1-9][0-9]*)")


def is_valid_team_identifier(identifier: str) -> bool:
    """Team identifiers are 2 to 5 uppercase ASCII letters."""
    return bool(TEAM_IDENTIFIER_RE.fullmatch(identifier))


def format_issue_identifier(team_identifier: str, number: int) -> str:
    return f"{team_identifier}-{number}"


def parse_issue_identifier(identifier: str) -> Optional[Tuple[str, int]]:
    """
    Split ``"ENG-12"`` into ``("ENG", 12)``.

    Returns:
        (team identifier, number), or None if the string is malformed
    """
    match = ISSUE_IDENTIFIER_RE.fullmatch(identifier)
    if match is None:
        return None
    return match.group(1), int(match.group(2))
