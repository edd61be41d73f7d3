"""Data types shared by the review text collector."""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import constants


class RetrievalError(Exception):
    """A single retrieval method failed; the message is the recorded reason."""


class RetrievalMethod(Enum):
    DIRECT = constants.METHOD_DIRECT
    PROXY = constants.METHOD_PROXY
    SNAPSHOT = constants.METHOD_SNAPSHOT


@dataclass
class ReviewRecord:
    """One review citation as loaded from its JSON file.

    ``data`` holds the file's full JSON object so that keys this pipeline
    does not know about survive a rewrite.
    """

    file_path: str
    show_id: str
    data: dict = field(default_factory=dict)

    @property
    def url(self) -> Optional[str]:
        return self.data.get('url') or None

    @property
    def outlet_id(self) -> str:
        return self.data.get('outletId') or ''

    @property
    def outlet(self) -> str:
        return self.data.get('outlet') or self.outlet_id

    @property
    def critic(self) -> Optional[str]:
        return self.data.get('criticName') or None

    @property
    def full_text(self) -> Optional[str]:
        return self.data.get('fullText') or None

    @property
    def word_count(self) -> int:
        stored = self.data.get('textWordCount')
        if stored is not None:
            return stored
        return len(self.full_text.split()) if self.full_text else 0

    @property
    def label(self) -> str:
        return f"{self.show_id}/{os.path.basename(self.file_path)}"


@dataclass
class RetrievalResult:
    """Outcome of one method attempt: content and text, or a failure reason."""

    method: RetrievalMethod
    raw_content: Optional[str] = None
    text: Optional[str] = None
    error: Optional[str] = None
    word_count: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class FailureLedgerEntry:
    file_path: str
    url: str
    show_id: str = ''
    outlet: str = ''
    critic: Optional[str] = None
    attempts: int = 0
    first_attempt: Optional[str] = None
    last_attempt: Optional[str] = None
    errors: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data):
        return cls(
            file_path=data['filePath'],
            url=data.get('url', ''),
            show_id=data.get('showId', ''),
            outlet=data.get('outlet', ''),
            critic=data.get('critic'),
            attempts=int(data.get('attempts', 0)),
            first_attempt=data.get('firstAttempt'),
            last_attempt=data.get('lastAttempt'),
            errors=list(data.get('errors', [])),
        )

    def to_dict(self):
        return {
            'filePath': self.file_path,
            'url': self.url,
            'showId': self.show_id,
            'outlet': self.outlet,
            'critic': self.critic,
            'attempts': self.attempts,
            'firstAttempt': self.first_attempt,
            'lastAttempt': self.last_attempt,
            'errors': self.errors,
        }
