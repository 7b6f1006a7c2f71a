"""Exceptions raised by dronefleet."""


class ConfigurationError(ValueError):
    """An option passed to ``configure`` is unknown or out of range.

    The simulation state is left untouched when this is raised.

    Attributes:
        field: Name of the offending option.
    """

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
