"""tempora: calendar event computations.

Public API:
  - import from `tempora.api` (preferred) or `import tempora` (re-export)
"""

from __future__ import annotations

from .api import *  # noqa: F401,F403
from . import api as _api

__version__ = "0.1.0"

__all__ = list(_api.__all__)
