"""App Store metadata handling."""

from .po_builder import AppStoreStringsBuilder, release_note_key
from .deliver_client import DeliverClient
from .publisher import MetadataPublisher

__all__ = ["AppStoreStringsBuilder", "release_note_key", "DeliverClient", "MetadataPublisher"]
