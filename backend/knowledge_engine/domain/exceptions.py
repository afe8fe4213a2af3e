"""Domain-specific exceptions, framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class ConflictError(Exception):
    """Raised when a write collides with a uniqueness constraint (e.g. duplicate slug)."""

    def __init__(self, entity_type: str, detail: str):
        self.entity_type = entity_type
        self.detail = detail
        super().__init__(f"{entity_type} conflict: {detail}")


DuplicateEntityError = ConflictError


class InvalidReferenceError(Exception):
    """Raised when a write references a row that does not exist (foreign key violation)."""

    def __init__(self, entity_type: str, detail: str):
        self.entity_type = entity_type
        self.detail = detail
        super().__init__(f"{entity_type} references a missing record: {detail}")


class InvalidInputError(ValueError):
    """Raised when caller input is malformed (bad filter, rating out of range, blank keyword)."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class StorageError(Exception):
    """Raised when the database fails for reasons not attributable to caller input.

    The underlying driver exception is chained as ``__cause__``.
    """

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"[{operation}] {message}")
