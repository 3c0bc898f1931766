"""Domain errors for the series pipeline stages."""

from pathlib import Path


class SeriesPipelineError(RuntimeError):
    """Base class for series pipeline errors."""


class ConfigurationError(SeriesPipelineError):
    """Raised when pipeline settings are invalid or inconsistent."""


class MissingArtifactError(SeriesPipelineError):
    """Raised when a stage's required input document does not exist."""

    def __init__(self, path: Path | str, description: str = "Required artifact") -> None:
        """Initialize missing artifact error.

        Args:
            path: Location the stage expected to read.
            description: Human-readable name of the missing document.
        """
        super().__init__(f"{description} not found: {path}")
        self.path = Path(path)


class ArtifactWriteError(SeriesPipelineError):
    """Raised when a result document cannot be persisted."""

    def __init__(self, path: Path | str, reason: str) -> None:
        """Initialize artifact write error.

        Args:
            path: Destination that failed to be written.
            reason: Underlying failure description.
        """
        super().__init__(f"Failed to write {path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class StageError(SeriesPipelineError):
    """Raised when a pipeline stage reports failure."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"Stage '{stage}' failed: {message}")
        self.stage = stage
