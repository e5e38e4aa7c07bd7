"""Bus factor resource clients."""

from busfactor.clients.contributors import ContributorFetcher
from busfactor.clients.repos import RepositoryLister

__all__ = [
    "ContributorFetcher",
    "RepositoryLister",
]
