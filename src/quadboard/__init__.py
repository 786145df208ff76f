"""Layout & drag-reflow engine for quadrant boards."""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("quadboard")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
