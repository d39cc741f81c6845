"""Error type shared by the ledger components."""


class LedgerError(Exception):
    """An error carrying a numeric code and a human-readable message.

    A code of -1 means no specific code was given.
    """

    def __init__(self, message: str, code: int = -1) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code})"