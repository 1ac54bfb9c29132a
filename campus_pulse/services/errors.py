"""
Domain exceptions
"""


class CampusPulseError(Exception):
    """Base class for every error raised by the service layer"""


class AuthenticationError(CampusPulseError):
    """Club name or password did not match"""

    def __init__(self, message: str = "Incorrect club name or password."):
        super().__init__(message)


class DuplicateClubError(CampusPulseError):
    """A club with the same name is already registered"""

    def __init__(self, name: str):
        self.name = name
        super().__init__("Club name already exists.")


class NotFoundError(CampusPulseError):
    resource = "Resource"

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"{self.resource} not found: {identifier}")


class ClubNotFoundError(NotFoundError):
    resource = "Club"


class EventNotFoundError(NotFoundError):
    resource = "Event"


class PersonNotFoundError(NotFoundError):
    resource = "Team member"


class ExpenseNotFoundError(NotFoundError):
    resource = "Expense"


class ReviewNotAllowedError(CampusPulseError):
    """Reviews open only once an event is over"""


class StorageError(CampusPulseError):
    pass


class StorageCorruptError(StorageError):
    """A stored collection could not be parsed"""

    def __init__(self, key: str, reason: str):
        self.key = key
        super().__init__(f"Stored value for {key!r} is corrupt: {reason}")


class StorageWriteError(StorageError):
    """Durable or session storage refused a write"""


class StorageQuotaExceededError(StorageWriteError):
    pass
