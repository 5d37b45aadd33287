"""metamint — publish asset metadata to content-addressable storage and mint it."""

__version__ = "0.1.0"
