"""Record types shared by the test suite.

Example usage:
    from tests.fixtures import Person, make_people

    people = make_people()
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum, IntEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict


@dataclass
class Person:
    """The two-column record used in the basic scenarios."""

    Id: int = 0
    Name: str = ""


@dataclass
class Employee:
    Id: int = 0
    Name: str = ""
    Age: int = 0


class Status(Enum):
    ACTIVE = "active"
    RETIRED = "retired"


class Priority(IntEnum):
    LOW = 1
    HIGH = 2


@dataclass
class Reading:
    """Record covering every built-in conversion."""

    sensor: str = ""
    count: int = 0
    ratio: float = 0.0
    amount: Decimal = Decimal("0")
    enabled: bool = False
    taken_at: datetime = datetime(2000, 1, 1)
    day: date = date(2000, 1, 1)
    status: Status = Status.ACTIVE
    priority: Priority = Priority.LOW
    ident: UUID = UUID(int=0)
    note: str | None = None
    limit: int | None = None


@dataclass
class NoDefaults:
    Id: int
    Name: str


@dataclass(frozen=True)
class FrozenPoint:
    x: int = 0
    y: int = 0


@dataclass
class Invoice:
    number: str = ""
    lines: list[str] = field(default_factory=list)
    net: float = 0.0
    tax_rate: float = 0.2

    @property
    def gross(self) -> float:
        return self.net * (1 + self.tax_rate)


class Account(BaseModel):
    id: int = 0
    owner: str = ""
    balance: float = 0.0


class LockedAccount(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = 0


class Contact:
    """Plain class with annotations and a writable property."""

    name: str
    phone: str = ""

    def __init__(self) -> None:
        self._email = ""

    @property
    def email(self) -> str:
        return self._email

    @email.setter
    def email(self, value: str) -> None:
        self._email = value.lower()


def make_people() -> list[Person]:
    return [Person(Id=1, Name="Alice"), Person(Id=2, Name="Bob")]


@dataclass
class Labelled:
    Id: int = 0
    Name: str = "unknown"


@dataclass
class Counted:
    Id: int | None = None


class Badge:
    """Plain class whose constructor needs an argument."""

    Id: int

    def __init__(self, Id: int) -> None:
        self.Id = Id


class Code(str):
    """String subclass mapped through the built-in text conversion."""
