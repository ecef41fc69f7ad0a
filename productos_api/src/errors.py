"""Error taxonomy raised by the product store and mapped to HTTP statuses in main."""

from __future__ import annotations


class StoreError(Exception):
    """Base class for every failure surfaced by the product store."""

    status_code = 500


class CorruptStoreError(StoreError):
    """The backing file is not a valid JSON array."""

    status_code = 500


class StorageIOError(StoreError):
    """The backing file could not be read or written."""

    status_code = 500


class NotFoundError(StoreError):
    """No record matches the requested identifier."""

    status_code = 404


class ValidationError(StoreError):
    """The request body or record shape was rejected."""

    status_code = 400


class DuplicateIdError(ValidationError):
    """The identifier is already used by another record."""

    status_code = 409


class StorageBusyError(StoreError):
    """The store lock could not be acquired in time."""

    status_code = 503
