"""The gfxmat material compiler."""

# ruff: noqa: F401, F403

__version__ = "0.1.0"
version_info = tuple(map(int, __version__.split(".")))

from . import utils
from .compiler import *
from .materials import *

from .utils import enums, logger
from .utils.enums import *
