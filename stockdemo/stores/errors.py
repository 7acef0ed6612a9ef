"""Errors raised by store implementations."""


class StoreError(Exception):
    """A quote table or transaction log could not be reached or written."""
