"""DecodeError and the library's exception types.

INVARIANT: Validation failures are values (``Err(DecodeError)``, ``Err(E)``),
never exceptions. The exceptions below signal programming errors only.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class RefinekitError(Exception):
    """Base class for refinekit programming errors."""


class UnwrapError(RefinekitError):
    """Raised when unwrapping the wrong variant of a Result."""


class DecodeError(BaseModel):
    """Structured decode failure.

    Attributes:
        code: Short machine-readable category (``"type"``, ``"unknown_value"``,
            ``"guard"``, ``"field"``, ``"json"``).
        message: Human-readable description.
        path: Field/index segments from the document root to the failure.
        detail: Extra context (offending input, violated bound, ...).
    """

    model_config = {"frozen": True}

    code: str
    message: str
    path: tuple[str | int, ...] = ()
    detail: dict[str, Any] = Field(default_factory=dict)

    def at(self, segment: str | int) -> DecodeError:
        """Return a copy located one level deeper, under *segment*."""
        return self.model_copy(update={"path": (segment, *self.path)})

    def render(self) -> str:
        """Render as ``"at $.a[0]: message"`` (or just the message at the root)."""
        if not self.path:
            return self.message
        location = "$"
        for segment in self.path:
            location += f"[{segment}]" if isinstance(segment, int) else f".{segment}"
        return f"at {location}: {self.message}"

    def __str__(self) -> str:
        return self.render()
