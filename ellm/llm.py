from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, Iterator, List, Optional, Union


@dataclass(frozen=True)
class Message:
    role: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class Messages:
    """Ordered conversation turns sent in a single request."""

    _messages: List[Message] = field(default_factory=list)

    def push_user(self, content: str) -> "Messages":
        self._messages.append(Message(role="user", content=content))
        return self

    def push_assistant(self, content: str) -> "Messages":
        self._messages.append(Message(role="assistant", content=content))
        return self

    def copy(self) -> "Messages":
        return Messages(list(self._messages))

    def to_list(self) -> List[Dict[str, str]]:
        return [m.to_dict() for m in self._messages]

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)


Prompt = Union[str, Messages]


class LLMClient:
    """Minimal LLM client interface."""

    def send_message(self, message: Prompt, lead: Optional[str] = None, system: Optional[str] = None) -> str:  # pragma: no cover - to be implemented by subclasses
        raise NotImplementedError
