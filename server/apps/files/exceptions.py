"""Exceptions for files app."""


class FilesError(Exception):
    """Base class for failures of file catalog and mutation operations."""


class StoreUnavailable(FilesError):  # noqa: N818
    """Raised when the blob store or the category store call fails."""

    def __init__(self, store: str, operation: str, target: str) -> None:
        """Initialize StoreUnavailable.

        Args:
            store: Which store failed ('blob' or 'category').
            operation: Store call that failed (e.g. 'put', 'array_add').
            target: Storage key or document id the call was made for.
        """
        self.store = store
        self.operation = operation
        self.target = target
        super().__init__(
            f'{store} store unavailable during {operation}: {target}',
        )


class NotFound(FilesError):  # noqa: N818
    """Raised when a delete or update target does not exist."""

    def __init__(self, kind: str, identifier: object) -> None:
        """Initialize NotFound.

        Args:
            kind: Kind of missing object ('file' or 'category').
            identifier: Storage key or category id that was looked up.
        """
        self.kind = kind
        self.identifier = identifier
        super().__init__(f'{kind} not found: {identifier}')


class PreconditionFailed(FilesError):  # noqa: N818
    """Raised when a required file or category argument is missing."""

    def __init__(self, argument: str) -> None:
        """Initialize PreconditionFailed.

        Args:
            argument: Name of the missing argument.
        """
        self.argument = argument
        super().__init__(f'Missing required argument: {argument}')
