"""Exception types and process exit codes."""

# Exit codes
EXIT_OK = 0
EXIT_WARNING = 1
EXIT_ERROR = 2
EXIT_FATAL = 3
EXIT_CMDLINE = 4


class BorderError(Exception):
    """Base class for all errors raised by the border extractor."""


class ConfigError(BorderError):
    """Invalid configuration or command line value."""


class OutputExistsError(BorderError):
    """The output file already exists and overwriting was not requested."""


class GeometryError(BorderError):
    """A line geometry could not be built for a way."""

    def __init__(self, way_id: int, message: str):
        super().__init__(f"way {way_id}: {message}")
        self.way_id = way_id


class UnresolvedWayError(BorderError):
    """A way references a node whose location is not known."""

    def __init__(self, way_id: int, node_id: int):
        super().__init__(f"way {way_id}: location for node {node_id} not found")
        self.way_id = way_id
        self.node_id = node_id


class InputError(BorderError):
    """The input file cannot be found or read."""
