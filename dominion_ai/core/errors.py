"""
Exceptions raised by the Dominion rules engine and search.
"""


class DominionError(Exception):
    """Base class for all errors raised by this package."""


class IllegalMoveError(DominionError, ValueError):
    """
    Raised when a move is applied that is not currently legal.

    The caller can recover by discarding the move and asking for the
    legal moves again; the state is left untouched.
    """

    def __init__(self, move, reason: str = ""):
        self.move = move
        self.reason = reason
        message = f"Illegal move: {move}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvariantViolation(DominionError, RuntimeError):
    """
    Raised when the engine reaches a state that should be impossible,
    such as a decision point with no legal moves or cards appearing
    from nowhere. The current game cannot continue.
    """
