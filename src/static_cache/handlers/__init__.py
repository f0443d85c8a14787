"""Handler layer for HTTP concerns.

Handlers depend on services, not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Cache logic) -> (Store / Transformer)
"""

from .access_gate import REJECT_MESSAGE, AccessGate, admit
from .asset_handler import NOT_FOUND_MESSAGE, AssetHandler

__all__ = [
    "AccessGate",
    "AssetHandler",
    "NOT_FOUND_MESSAGE",
    "REJECT_MESSAGE",
    "admit",
]
