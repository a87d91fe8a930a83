"""Exceptions raised by the paybot core."""


class PaybotError(Exception):
    """Base class for paybot errors."""


class SessionNotConnected(PaybotError):
    """A command was handed to the game session while it had no open connection."""

    def __init__(self, text: str = "") -> None:
        self.text = text
        super().__init__(f"Game session is not connected (command: {text!r})")
