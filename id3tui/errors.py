class Id3TuiError(Exception):
    """Base class for errors shown to the user."""


class UsageError(Id3TuiError):
    """Bad command line argument."""


class CommandError(Id3TuiError):
    """An external program failed."""

    def __init__(self, name: str, output: str, cause: str):
        self.name = name
        self.output = output
        self.cause = cause
        super().__init__(f"{output.strip()}: {cause}" if output.strip() else f"{name}: {cause}")


class SaveError(Id3TuiError):
    """Writing tags back to a file failed. The message names the failing stage."""
