"""Library-level information."""

_VERSION = "1.0.0"


class Lib:
    """Access to library metadata."""

    def version(self) -> str:
        """Return the library version string."""
        return _VERSION