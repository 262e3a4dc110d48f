"""Domain entity for generated flashcards."""

from dataclasses import dataclass
from typing import Any


@dataclass
class Flashcard:
    question: str
    answer: str
    hint: str | None = None

    def to_dict(self) -> dict[str, Any]:
        card: dict[str, Any] = {"question": self.question, "answer": self.answer}
        if self.hint:
            card["hint"] = self.hint
        return card
