"""Bus factor type definitions.

This module exports all data model types used by the pipeline.
"""

from busfactor.types.contributors import ContributionSet, Contributor
from busfactor.types.repos import Repository
from busfactor.types.results import BusFactorResult, FetchFailure, ProgressEvent

__all__ = [
    # Repository types
    "Repository",
    # Contributor types
    "Contributor",
    "ContributionSet",
    # Result types
    "BusFactorResult",
    "FetchFailure",
    "ProgressEvent",
]
