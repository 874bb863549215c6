"""Completion dispatch module for routerchat.

Background completion exchanges and the relay that carries their
results back to the interaction loop.
"""

from .dispatcher import CompletionDispatcher, ProviderFactory
from .models import DispatchFailure, DispatchResult, DispatchSuccess, FailureKind
from .relay import ResponseRelay

__all__ = [
    "CompletionDispatcher",
    "DispatchFailure",
    "DispatchResult",
    "DispatchSuccess",
    "FailureKind",
    "ProviderFactory",
    "ResponseRelay",
]
