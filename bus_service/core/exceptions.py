class PersistenceError(Exception):
    """Base class for errors raised by the data access layer."""


class ConstraintViolation(PersistenceError):
    """A unique or check constraint rejected the statement."""


class Unavailable(PersistenceError):
    """The database could not be reached or the statement failed to execute."""
