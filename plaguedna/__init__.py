"""
plaguedna - DNA codec for a pathogen simulation

Encodes a pathogen's numeric traits and capability list into a printable DNA
string, and validates player-spliced strings back into pathogen state.
"""

__version__ = "0.1.0"

# Expose common submodules for convenience
from .codec import *  # noqa: F401,F403
from .entity import *  # noqa: F401,F403
from .evolution import *  # noqa: F401,F403
from .registry import *  # noqa: F401,F403
from .splicing import *  # noqa: F401,F403
from .utils import *  # noqa: F401,F403
from .validation import *  # noqa: F401,F403

from .config import PRESET_DETERMINISTIC, PRESET_STANDARD  # noqa: F401
