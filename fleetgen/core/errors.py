"""Error types raised by the layout generator."""

from __future__ import annotations


class FleetConfigError(ValueError):
    """Generator configuration is malformed."""


class CandidateSetEmptyError(IndexError):
    """Random pop requested from an empty candidate set."""


class BoardStateError(RuntimeError):
    """Board mutation would break occupancy or neighbor-count invariants."""


class CandidateSetStateError(RuntimeError):
    """Candidate set bitmap and member list disagree."""
