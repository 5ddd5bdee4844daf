"""Input collection for edit and create actions.

An action asks an :class:`InputSource` for one field at a time, offering the
current value as default. An empty or cancelled answer aborts the whole
action: :func:`collect` then returns a partial :class:`FormResult` and the
action reports :attr:`Outcome.PARTIAL` without touching any record. This also
means a field can never be cleared to an empty value through an edit.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence

from portal.errors import PortalError


@dataclass(frozen=True)
class FormField:
    name: str
    label: str


class InputSource(Protocol):
    def prompt(self, field: FormField, default: Optional[str] = None) -> Optional[str]:
        """Return the answer, or None when cancelled."""
        ...

    def confirm(self, message: str) -> bool:
        ...


class FormInput:
    """Answers taken from a submitted form.

    A field missing from the submission keeps its default, the same as
    accepting a pre-filled prompt. A field submitted as ``None`` or ``""``
    counts as cancelled.
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None, confirmed: bool = False):
        self.values = dict(values or {})
        self.confirmed = confirmed

    def prompt(self, field: FormField, default: Optional[str] = None) -> Optional[str]:
        if field.name not in self.values:
            return default
        value = self.values[field.name]
        return None if value is None else str(value)

    def confirm(self, message: str) -> bool:
        return self.confirmed


class ConsoleInput:
    """Answers typed at the terminal. EOF or Ctrl-C counts as cancel."""

    def prompt(self, field: FormField, default: Optional[str] = None) -> Optional[str]:
        suffix = f" [{default}]" if default else ""
        try:
            answer = input(f"{field.label}{suffix}: ")
        except (EOFError, KeyboardInterrupt):
            print()
            return None
        if answer == "" and default:
            return default
        return answer

    def confirm(self, message: str) -> bool:
        try:
            answer = input(f"{message} [y/N]: ")
        except (EOFError, KeyboardInterrupt):
            print()
            return False
        return answer.strip().lower() in ("y", "yes")


@dataclass
class FormResult:
    values: Dict[str, str] = field(default_factory=dict)
    missing: Optional[str] = None

    @property
    def partial(self) -> bool:
        return self.missing is not None

    def __getitem__(self, name: str) -> str:
        return self.values[name]


def collect(
    source: InputSource,
    fields: Sequence[FormField],
    defaults: Optional[Mapping[str, str]] = None,
) -> FormResult:
    """Prompt each field in order, stopping at the first empty answer."""
    defaults = defaults or {}
    result = FormResult()
    for f in fields:
        answer = source.prompt(f, defaults.get(f.name))
        if not answer:
            result.missing = f.name
            return result
        result.values[f.name] = answer
    return result


# -----------------------------
# Action outcomes
# -----------------------------
class Outcome(str, Enum):
    DONE = "done"
    PARTIAL = "partial"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class ActionResult:
    outcome: Outcome
    error: Optional[PortalError] = None

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.DONE
