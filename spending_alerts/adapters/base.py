"""Base class shared by all infrastructure collaborators."""
import logging
from enum import Enum


class ConnectionMode(Enum):
    """How a collaborator was constructed."""
    LIVE = "live"         # Performs the real side effect
    NULL = "null"         # Embedded stub, no real side effect


class BaseAdapter:
    """
    Base class for infrastructure collaborators.

    Subclasses expose two factories: ``create()`` wires in the real
    third-party capability (system clock, aiohttp, smtplib) and
    ``create_null()`` wires in an embedded stub of that same capability.
    Everything above the stubbed capability is shared code, so it runs in
    tests exactly as it runs in production.
    """

    def __init__(self, mode: ConnectionMode):
        self._mode = mode
        self.logger = logging.getLogger(f"SpendingAlerts.{self.__class__.__name__}")

    @property
    def mode(self) -> ConnectionMode:
        """Get construction mode."""
        return self._mode

    @property
    def is_null(self) -> bool:
        """Check if the collaborator performs no real side effects."""
        return self._mode is ConnectionMode.NULL
