"""Feed fetching, blob storage and the refreshable version catalog."""

from umt_gen.core.blob import BlobStore, LocalBlobStore
from umt_gen.core.catalog import CatalogService, CatalogSnapshot, RefreshTarget, SnapshotStore
from umt_gen.core.feeds import FeedClient, FeedFetchError, FeedSource

__all__ = [
    "BlobStore",
    "CatalogService",
    "CatalogSnapshot",
    "FeedClient",
    "FeedFetchError",
    "FeedSource",
    "LocalBlobStore",
    "RefreshTarget",
    "SnapshotStore",
]
