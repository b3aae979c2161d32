"""Snapshot pipeline orchestration."""

from .snapshot import SnapshotOrchestrator

__all__ = ["SnapshotOrchestrator"]
