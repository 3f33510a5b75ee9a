"""Deploy job state and result normalization."""

from dataclasses import dataclass, field
from typing import Any


DEFAULT_FAILURE_MESSAGE = "Deployment failed"


@dataclass
class DeployResult:
    """Snapshot of a remote deploy job as last observed."""

    id: str
    done: bool = False
    success: bool = False
    status: str = ""
    completed_date: str | None = None
    error_message: str | None = None
    # Remote side sends a single object or a list; kept raw until normalized
    component_successes: Any = None
    component_failures: Any = None


@dataclass
class ComponentSuccess:
    """One artifact the remote side created or changed."""

    full_name: str = ""
    file_name: str = ""
    created: bool = False
    changed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "fullName": self.full_name,
            "fileName": self.file_name,
            "created": self.created,
            "changed": self.changed,
        }


@dataclass
class DeployOutcome:
    """What a successful deploy reports back to the caller."""

    component: str
    targets: list[str]
    status: str
    id: str
    completed_date: str | None
    successes: list[ComponentSuccess] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": True,
            "component": self.component,
            "targets": self.targets,
            "status": self.status,
            "id": self.id,
            "completedDate": self.completed_date,
            "successes": [s.to_dict() for s in self.successes],
        }


def as_list(value: Any) -> list[Any]:
    """Single object or collection, as a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def extract_deploy_failure_message(result: DeployResult | None) -> str:
    """
    One line per component failure: ``<file>[:<line>] - <problem>``.

    Falls back to the job's error message, then to a generic string.
    """
    if result is None:
        return DEFAULT_FAILURE_MESSAGE

    messages: list[str] = []
    for item in as_list(result.component_failures):
        if not isinstance(item, dict) or not item:
            continue
        file_name = _text(item.get("fileName"))
        line = _text(item.get("lineNumber"))
        location = f"{file_name}:{line}" if file_name and line else file_name
        problem = _text(item.get("problem") or item.get("message") or item.get("error"))
        if location and problem:
            messages.append(f"{location} - {problem}")
        elif problem or location:
            messages.append(problem or location)

    if messages:
        return "\n".join(messages)
    return result.error_message or DEFAULT_FAILURE_MESSAGE


def normalize_component_successes(successes: Any) -> list[ComponentSuccess]:
    """Success entries as a list, dropping ones with neither name."""
    entries: list[ComponentSuccess] = []
    for item in as_list(successes):
        if not isinstance(item, dict):
            continue
        entry = ComponentSuccess(
            full_name=_text(item.get("fullName")),
            file_name=_text(item.get("fileName")),
            created=as_bool(item.get("created", False)),
            changed=as_bool(item.get("changed", False)),
        )
        if entry.full_name or entry.file_name:
            entries.append(entry)
    return entries
