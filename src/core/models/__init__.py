"""
Domain models — Pydantic types for extdl.

All models are re-exported here for convenient access:

    from src.core.models import ExtensionInfo, Action, Receipt, ResolutionError
"""

from src.core.models.action import Action, Receipt
from src.core.models.errors import ErrorKind, ResolutionError, RunFailure
from src.core.models.extension import ExtensionInfo, ResolvedDownload
from src.core.models.settings import Settings
from src.core.models.state import CatalogCache, ExtensionState, InstalledExtension

__all__ = [
    # action.py
    "Action",
    "CatalogCache",
    # errors.py
    "ErrorKind",
    # extension.py
    "ExtensionInfo",
    # state.py
    "ExtensionState",
    "InstalledExtension",
    "Receipt",
    "ResolutionError",
    "ResolvedDownload",
    "RunFailure",
    # settings.py
    "Settings",
]
