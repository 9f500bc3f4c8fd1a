class FusselError(Exception):
    """Base class for errors that abort a lint run."""


class ConfigError(FusselError):
    """Raised when the configuration cannot be found, parsed or validated."""


class DiscoveryError(FusselError):
    """Raised when the project root cannot be determined."""


class RepositoryNotFoundError(DiscoveryError):
    pass


class BareRepositoryError(DiscoveryError):
    pass


class LintRunError(FusselError):
    """Raised when a file or directory cannot be read during a run."""


def iter_causes(error: BaseException) -> list[BaseException]:
    """Return the chain of explicit causes below *error*, outermost first."""
    causes: list[BaseException] = []
    current = error.__cause__
    while current is not None and current not in causes:
        causes.append(current)
        current = current.__cause__
    return causes
