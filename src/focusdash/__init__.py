"""Focus Dashboard - Study/Break countdown with background music.

The dashboard provides:
- A Study/Short Break countdown that alternates automatically
- A playlist of hosted videos played as background audio
- A notification tone when an interval ends

Usage:
    python -m focusdash --profile dev
    python -m focusdash --config my.yaml
"""

__version__ = "0.1.0"

from .config import FocusConfig
from .config.loader import load_config

__all__ = [
    "FocusConfig",
    "__version__",
    "load_config",
]
