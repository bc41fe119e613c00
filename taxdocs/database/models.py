from dataclasses import dataclass


@dataclass
class UserRecord:
    """Represents a row from the users table."""

    id: str
    email: str
    name: str | None = None
