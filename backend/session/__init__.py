"""
Session Module
Owns the editor graph and applies user actions (add, connect, move, delete, clear, auto layout).
"""

from .editor import EditorSession
from .errors import InvalidLabelError, SelfLoopError, SessionError, UnknownEdgeError, UnknownNodeError

__all__ = [
    "EditorSession",
    "InvalidLabelError",
    "SelfLoopError",
    "SessionError",
    "UnknownEdgeError",
    "UnknownNodeError",
]
