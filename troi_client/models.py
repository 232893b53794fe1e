from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class CalendarEventType(str, Enum):
    R = "R"
    H = "H"
    G = "G"
    P = "P"
    T = "T"


@dataclass
class CalculationPosition:
    id: int
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CalculationPosition':
        return cls(
            id=data.get('Id'),
            name=data.get('DisplayPath'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name}


@dataclass
class TimeEntry:
    id: int
    date: str
    hours: float
    description: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TimeEntry':
        # billings carry a lower-case id, unlike every other troi resource
        return cls(
            id=data.get('id'),
            date=data.get('Date'),
            hours=data.get('Quantity'),
            description=data.get('Remark'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'date': self.date,
            'hours': self.hours,
            'description': self.description,
        }


@dataclass
class CalendarEvent:
    id: str
    start_date: str
    end_date: str
    subject: str
    type: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CalendarEvent':
        return cls(
            id=data.get('id'),
            start_date=data.get('Start'),
            end_date=data.get('End'),
            subject=data.get('Subject'),
            type=data.get('Type'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'startDate': self.start_date,
            'endDate': self.end_date,
            'subject': self.subject,
            'type': self.type,
        }
