"""
Exceptions raised by the experience replay pipeline.

All of them derive from ValueError so callers that already guard against bad
inputs with ``except ValueError`` keep working.
"""


class ReplayQError(ValueError):
    """Base class for all errors raised by replayq."""


class MalformedInputError(ReplayQError):
    """The batch of transition tuples is missing columns or holds null/non-numeric fields."""


class InvalidConfigurationError(ReplayQError):
    """A learning or sampling parameter is out of range or unrecognised."""


class EnvironmentContractError(ReplayQError):
    """The environment function did not return a next state and a numeric reward."""

    def __init__(self, message, state=None, action=None):
        super().__init__(message)
        self.state = state
        self.action = action
