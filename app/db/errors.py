class StorageUnavailableError(Exception):
    """The relational store could not serve the transaction; nothing was committed."""

    code = "E_STORAGE_UNAVAILABLE"
