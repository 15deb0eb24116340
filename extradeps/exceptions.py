"""Custom exceptions for extradeps."""


class ExtradepsError(Exception):
    """Base exception for all extradeps errors."""


class ManifestError(ExtradepsError):
    """Raised when a package.json manifest cannot be obtained."""


class ManifestNotFoundError(ManifestError):
    """Raised when no package.json exists where one was expected."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No package.json found for {path}")


class ManifestParseError(ManifestError):
    """Raised when a package.json file is not valid JSON."""

    def __init__(self, path: str, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(detail)


class ManifestReadError(ManifestError):
    """Raised on I/O failures other than a missing file."""

    def __init__(self, path: str, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(detail)


class ConfigError(ExtradepsError):
    """Raised when rule options are malformed."""
