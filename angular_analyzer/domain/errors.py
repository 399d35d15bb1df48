"""Errors raised by the analysis pipeline."""


class AnalysisError(Exception):
    """Base class for fatal analysis errors."""
    pass


class RouteFileNotFoundError(AnalysisError):
    """The routing declaration file is not part of the project."""
    pass


class SourceParseError(AnalysisError):
    """A TypeScript source or template could not be parsed."""

    def __init__(self, path: str, message: str = ''):
        self.path = path
        super().__init__(message or f"Syntax error in {path}")


class ComponentResolutionError(AnalysisError):
    """A component declaration is missing something the analysis needs."""

    def __init__(self, component: str, source_file: str, message: str):
        self.component = component
        self.source_file = source_file
        super().__init__(f"{component} ({source_file}): {message}")


class TemplateNotFoundError(ComponentResolutionError):
    """Neither an inline template nor a readable template file was found."""
    pass


class SelectorNotFoundError(ComponentResolutionError):
    """The component declaration has no selector."""
    pass
