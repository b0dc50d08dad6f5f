__title__ = 'argstick'
__author__ = 'argstick contributors'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .engine import *
from .faults import *
from .hooks import *
from .metadata import *
from .revivers import *
from .sticky import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the engine
__all__ += engine.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the hooks
__all__ += hooks.__all__  # type: ignore[attr-defined]
# Load the exposed API of the metadata
__all__ += metadata.__all__  # type: ignore[attr-defined]
# Load the exposed API of the revivers
__all__ += revivers.__all__  # type: ignore[attr-defined]
# Load the exposed API of the sticky arguments
__all__ += sticky.__all__  # type: ignore[attr-defined]
