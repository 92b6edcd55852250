"""Exceptions raised at the boundaries of the rules engine.

All of them are ``ValueError`` subclasses, so callers that only care about bad
input can keep catching ``ValueError``.
"""

from __future__ import annotations


class DecodeError(ValueError):
    """Text that is not a valid state, turn, history or cell name."""


class RejectedTurnError(ValueError):
    """A turn that is not in the legal-turn list of the state it was applied to."""


class SearchError(ValueError):
    """A bad strategy descriptor, or a search asked to move in a finished game."""
