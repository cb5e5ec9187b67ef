"""Data classes for the study deck domain model."""
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Topic:
    name: str
    weight: int

    def to_dict(self) -> dict:
        return {"name": self.name, "weight": self.weight}


@dataclass
class BatchCard:
    subject: str
    name: str
    weight: int
    done: bool = False

    def to_dict(self) -> dict:
        return {
            "subject": self.subject,
            "name": self.name,
            "weight": self.weight,
            "done": self.done,
        }


@dataclass
class StudyState:
    active: bool = False
    decks: dict[str, list[Topic]] = field(default_factory=dict)
    current_batch: list[BatchCard] = field(default_factory=list)
    quiz_date: Optional[int] = None  # epoch milliseconds
    range_str: str = ""

    def to_dict(self) -> dict:
        """Serialize to the persisted JSON shape."""
        return {
            "active": self.active,
            "decks": {
                subject: [t.to_dict() for t in deck]
                for subject, deck in self.decks.items()
            },
            "currentBatch": [card.to_dict() for card in self.current_batch],
            "quizDate": self.quiz_date,
            "rangeStr": self.range_str,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StudyState":
        """Build a state from an already validated blob."""
        return cls(
            active=data.get("active", False),
            decks={
                subject: [Topic(name=t["name"], weight=t["weight"]) for t in deck]
                for subject, deck in data["decks"].items()
            },
            current_batch=[
                BatchCard(
                    subject=c["subject"],
                    name=c["name"],
                    weight=c["weight"],
                    done=c.get("done", False),
                )
                for c in data["currentBatch"]
            ],
            quiz_date=data.get("quizDate"),
            range_str=data.get("rangeStr", ""),
        )


def default_state() -> StudyState:
    return StudyState()
