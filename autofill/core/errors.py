"""Exception types raised while loading engine inputs."""


class AutofillError(Exception):
    """Base class for autofill errors."""


class ConfigError(AutofillError):
    """A settings or profile file could not be read."""


class DuplicateProfileKeyError(AutofillError, ValueError):
    """Two profile fields share the same label."""

    def __init__(self, labels: list[str]) -> None:
        self.labels = labels
        super().__init__(f"Duplicate profile labels: {', '.join(labels)}")
