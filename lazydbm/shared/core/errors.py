"""Exception hierarchy shared across lazydbm."""


class LazyDBMError(Exception):
    """Base class for all lazydbm errors."""


class ConfigError(LazyDBMError):
    """Raised for unreadable config files or connections missing a required field."""


class DataSourceError(LazyDBMError):
    """Raised when a backend call (connect, query) fails."""


class ExternalProcessError(LazyDBMError):
    """Raised when an external CLI tool is missing, fails to start or exits non-zero."""
