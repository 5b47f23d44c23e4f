import json
import logging
import threading
from typing import Optional, Protocol

from lifecycle_audit.src.lifecycle_audit.models.type_models import MethodDescriptor

logger = logging.getLogger(__name__)

VIOLATION_TEMPLATE = (
    "Test class {name} has methods which are public but not explicitly annotated. "
    "Are they missing @Test?{methods}"
)
FAULT_TEMPLATE = "Failed to process {target}: \n{trace}"


# --- Failure channel ---------------------------------------------------------

class ViolationReporter(Protocol):
    """Anything that accepts failures found while auditing a class."""

    def report(self, source_component: str, message: str) -> None:
        ...


class LoggingReporter:
    """
    Writes each failure to the log at ERROR and counts them, so a caller can
    turn "anything reported" into an exit status.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger
        self.failure_count = 0
        self._lock = threading.Lock()

    def report(self, source_component: str, message: str) -> None:
        with self._lock:
            self.failure_count += 1
        self.log.error("Listener %s failure: %s", source_component, message)


class CollectingReporter:
    """Keeps (source_component, message) pairs in memory."""

    def __init__(self):
        self.reports: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def report(self, source_component: str, message: str) -> None:
        with self._lock:
            self.reports.append((source_component, message))

    @property
    def messages(self) -> list[str]:
        with self._lock:
            return [message for _, message in self.reports]


# --- Message formatting ------------------------------------------------------

def format_violation_message(type_name: str, methods: list[MethodDescriptor]) -> str:
    """One line per method, each introduced by a newline and two tabs."""
    listing = "".join(f"\n\t\t{m}" for m in methods)
    return VIOLATION_TEMPLATE.format(name=type_name, methods=listing)


def format_fault_message(target: object, trace: str) -> str:
    return FAULT_TEMPLATE.format(target=target, trace=trace)


# --- Pretty printing & JSON export ------------------------------------------

def print_summary(results: dict[str, list[MethodDescriptor]]):
    """
    Human-friendly printout of every analyzed class and its unannotated methods.
    """
    print("\n=== UNANNOTATED PUBLIC METHODS ===")
    flagged = 0
    for type_name, violations in sorted(results.items()):
        if not violations:
            continue
        flagged += 1
        print(f"\n[{type_name}]")
        for m in violations:
            print(f"  - {m.name}({', '.join(m.parameter_types)})  declared in {m.declaring_type.name}")
    print(f"\n{flagged} of {len(results)} classes have unannotated public methods")


def to_json(results: dict[str, list[MethodDescriptor]]) -> str:
    """
    Serializes the audit results to JSON.
    """
    out = {
        "classes": [
            {
                "fqcn": type_name,
                "violations": [
                    {
                        "name": m.name,
                        "parameterTypes": list(m.parameter_types),
                        "returnType": m.return_type,
                        "declaringType": m.declaring_type.name,
                        "signature": str(m),
                    }
                    for m in violations
                ],
            }
            for type_name, violations in sorted(results.items())
        ]
    }
    return json.dumps(out, indent=2)
