"""
Error types for Agency Leadership.
Business outcomes (losses, churn, bankruptcy) are data, never exceptions.
"""


class InvalidInputError(ValueError):
    """A submitted decision field the engine cannot act on."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason

    def to_dict(self) -> dict:
        return {"field": self.field, "reason": self.reason}


class ConfigurationError(ValueError):
    """Malformed game or level configuration; raised at game creation."""


class GameNotFoundError(KeyError):
    """No game (or team within a game) stored under the given id."""


class QuarterNotReadyError(RuntimeError):
    """Quarter resolution requested before every active team submitted."""
