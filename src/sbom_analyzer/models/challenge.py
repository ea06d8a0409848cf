"""
Append-only log of notable events (fetches, scans, comparisons, reports).
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List


@dataclass
class ChallengeLogEntry:
    """A single logged event and, if any, how it was resolved."""

    title: str
    description: str
    solved: bool = False
    solution: str = ""
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "solved": self.solved,
            "solution": self.solution,
            "timestamp": self.timestamp
        }


class ChallengeLog:
    """Newest-first event log. Entries are never modified or removed."""

    def __init__(self):
        self._entries: List[ChallengeLogEntry] = [
            ChallengeLogEntry(
                title="Initial Setup",
                description="Application loaded and ready to scan repositories",
                solved=True,
                solution="Add GitHub repository URLs to begin scanning"
            )
        ]

    def add(self, title: str, description: str, solved: bool = False, solution: str = "") -> ChallengeLogEntry:
        entry = ChallengeLogEntry(title=title, description=description, solved=solved, solution=solution)
        self._entries.insert(0, entry)
        return entry

    @property
    def entries(self) -> List[ChallengeLogEntry]:
        return list(self._entries)

    def to_list(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self._entries]

    def __iter__(self) -> Iterator[ChallengeLogEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
