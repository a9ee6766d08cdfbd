"""Minesweeper: board model, game sessions, statistics, a TCP link and a Tk window."""

__version__ = "0.1.0"