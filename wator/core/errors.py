"""Errors raised by the Wa-Tor simulation."""

from __future__ import annotations


class SimulationError(Exception):
    """
    Raised by a step when the simulation cannot continue.

    This is the terminal condition of every simulation loop: it is raised
    when either fish or sharks have died out before a tick starts.

    Attributes:
        message: Human-readable reason.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message
