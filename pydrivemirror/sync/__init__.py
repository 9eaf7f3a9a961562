"""Mirror engine for pydrivemirror - one-way remote to local tree sync."""

from .difflog import DiffLog
from .engine import MirrorEngine
from .operations import SyncOperations
from .pair import MirrorPair
from .reconciler import (
    Reconciler,
    SyncAction,
    SyncDecision,
    create_empty_stats,
    decide,
)
from .snapshot import LocalTree
from .sweeper import OrphanSweeper
from .walker import RemoteTreeWalker

__all__ = [
    "MirrorEngine",
    "MirrorPair",
    "SyncOperations",
    "DiffLog",
    "LocalTree",
    "RemoteTreeWalker",
    "Reconciler",
    "SyncAction",
    "SyncDecision",
    "create_empty_stats",
    "decide",
    "OrphanSweeper",
]
