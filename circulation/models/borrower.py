"""Borrower references.

A loan belongs to exactly one borrower, which is either a student or a
teacher. ``BorrowerRef`` makes that a single value so that "both" and
"neither" cannot be expressed. The ids are opaque references to records
owned by the school-administration side.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass


class BorrowerType(str, enum.Enum):
    STUDENT = "student"
    TEACHER = "teacher"


@dataclass(frozen=True)
class BorrowerRef:
    kind: BorrowerType
    id: str

    def __post_init__(self):
        if not isinstance(self.kind, BorrowerType):
            raise ValueError(f"Unknown borrower type: {self.kind!r}")
        if not self.id or not str(self.id).strip():
            raise ValueError("Borrower id is required")

    @classmethod
    def student(cls, student_id: str) -> "BorrowerRef":
        return cls(BorrowerType.STUDENT, str(student_id))

    @classmethod
    def teacher(cls, teacher_id: str) -> "BorrowerRef":
        return cls(BorrowerType.TEACHER, str(teacher_id))

    @classmethod
    def parse(cls, borrower_type: str | None, borrower_id) -> "BorrowerRef":
        """Build a reference from loose request values; raises ValueError."""
        try:
            kind = BorrowerType((borrower_type or "").strip().lower())
        except ValueError:
            raise ValueError("borrower_type must be 'student' or 'teacher'") from None
        return cls(kind, "" if borrower_id is None else str(borrower_id).strip())

    @property
    def student_id(self) -> str | None:
        return self.id if self.kind is BorrowerType.STUDENT else None

    @property
    def teacher_id(self) -> str | None:
        return self.id if self.kind is BorrowerType.TEACHER else None

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"
