from pathlib import Path


class ThemeBuildError(Exception):
    """Base class for every failure that aborts a theme build."""


class TemplateNotFoundError(ThemeBuildError):
    def __init__(self, path: Path, reason: str = "missing or unreadable"):
        self.path = Path(path)
        super().__init__(f"Required template {reason}: {self.path}")


class ConfigurationError(ThemeBuildError):
    pass


class PipelineStateError(ThemeBuildError):
    pass
