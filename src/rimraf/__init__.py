"""rimraf — safe deep deletion with include/exclude glob patterns."""

__version__ = "0.1.0"


class RimrafError(Exception):
    """Base error for problems found before anything is deleted.

    Covers a root that is not a directory and patterns that do not compile.
    ``main`` prints ``rimraf: <message>`` and exits with status 1.
    Removal failures are never raised. They end up in the run summary.
    """


class DirectoryNotFoundError(RimrafError):
    """Raised when the root path is not an existing directory."""
