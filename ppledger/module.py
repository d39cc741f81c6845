"""Base class for components that log under their own name."""

from ppledger.logger import Logger, get_logger


class Module:
    """A component owning a named logger in the global registry."""

    def __init__(self, name: str) -> None:
        self._logger_name = name

    def redirect_logger(self, target_logger_name: str) -> None:
        """Send this module's log messages to another named logger."""
        self.log.redirect_to(target_logger_name)

    def clear_logger_redirect(self) -> None:
        self.log.clear_redirect()

    @property
    def logger_name(self) -> str:
        return self._logger_name

    @property
    def log(self) -> Logger:
        """The logger registered under this module's name."""
        return get_logger(self._logger_name)