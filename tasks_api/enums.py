from enum import Enum


class StatusType(str, Enum):
    """Lifecycle state of a task.

    The lowercase value is the only external representation: it is what the
    API emits and accepts and what the ``status`` column stores.
    """

    TODO = "todo"
    DONE = "done"

    @classmethod
    def parse(cls, value: str) -> "StatusType":
        """Resolve a status token, case-sensitively."""
        for member in cls:
            if member.value == value:
                return member
        raise ValueError(f"{value} does not belong to StatusType values")

    def __str__(self) -> str:
        return self.value
