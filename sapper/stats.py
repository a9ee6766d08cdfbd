"""Win/loss statistics and their persistence."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path


def default_stats_path() -> Path:
    """Location of the statistics file in the user's configuration area."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Roaming"
    else:
        base = os.environ.get("XDG_CONFIG_HOME")
        root = Path(base) if base else Path.home() / ".config"
    return root / "Minesweeper" / "Stats.json"


@dataclass
class Stats:
    """Number of wins and losses and the fastest winning time in seconds."""

    wins: int = 0
    losses: int = 0
    best_time: int | None = None

    def record_win(self, seconds: int) -> None:
        self.wins += 1
        if self.best_time is None or seconds < self.best_time:
            self.best_time = seconds

    def record_loss(self) -> None:
        self.losses += 1

    def lines(self) -> list[str]:
        """Text lines shown in the statistics dialog."""
        best = "--" if self.best_time is None else str(self.best_time)
        return [
            f"Побед: {self.wins}",
            f"Поражений: {self.losses}",
            f"Лучшее время: {best}",
        ]

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> Stats:
        """Read statistics; a missing file gives empty statistics."""
        target = Path(path) if path is not None else default_stats_path()
        try:
            text = target.read_text(encoding="utf-8")
        except FileNotFoundError:
            return cls()
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"{target}: statistics must be a JSON object")
        best = data.get("bestTime")
        return cls(
            wins=int(data.get("wins", 0)),
            losses=int(data.get("losses", 0)),
            best_time=None if best is None else int(best),
        )

    def save(self, path: str | os.PathLike[str] | None = None) -> None:
        target = Path(path) if path is not None else default_stats_path()
        target.parent.mkdir(parents=True, exist_ok=True)
        payload = {"wins": self.wins, "losses": self.losses, "bestTime": self.best_time}
        target.write_text(json.dumps(payload), encoding="utf-8")