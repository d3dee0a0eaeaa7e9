"""Exception hierarchy for maze generation."""


class MazeGenerationError(Exception):
    pass


class MazeConfigError(MazeGenerationError):
    """Invalid settings, assets or template definitions."""
    pass


class TemplateError(MazeConfigError):
    """A chunk template definition is malformed."""
    pass
