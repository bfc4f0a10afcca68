# sharebox/models/errors.py

"""Exception hierarchy shared by the store, storage and views."""


class ShareBoxError(Exception):
    """Base class for all ShareBox errors."""


class StorageError(ShareBoxError):
    """A key-value storage backend failed to read or write."""


class ProductValidationError(ShareBoxError):
    """User-supplied product fields were rejected."""
