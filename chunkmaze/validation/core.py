"""
Result types for maze validation.

Checks never raise; they collect ValidationIssues on a ValidationResult and
the caller decides what a FAIL means. Generation logs FAIL issues and marks
the report unsuccessful, tools may call ``raise_if_failed()`` instead.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class Severity(Enum):
    """How bad an issue is.

    INFO issues are observations (budget reached), WARN issues are tolerated
    degradations (selection fallback), FAIL issues are broken invariants.
    """
    INFO = auto()
    WARN = auto()
    FAIL = auto()

    def __str__(self) -> str:
        return self.name


class ValidationStage(Enum):
    """Point in a generation pass an issue was found at."""
    REGISTRATION = "registration"
    GROWTH = "growth"
    SELECTION = "selection"
    POPULATION = "population"

    def __str__(self) -> str:
        return self.value


@dataclass
class ValidationIssue:
    """One finding against a maze.

    Attributes:
        severity: INFO, WARN or FAIL
        code: Rule code such as "MAZE-004"
        message: Rendered rule message
        rule_reference: Name of the invariant the rule guards
        remediation: Rendered fix hint, if the rule has one
        chunk: Index of the chunk involved, if any
        connector: Socket reference involved, if any
    """
    severity: Severity
    code: str
    message: str
    rule_reference: str
    remediation: Optional[str] = None
    chunk: Optional[int] = None
    connector: Optional[str] = None

    def format(self) -> str:
        """One-line rendering: [SEV] CODE chunk=C connector=P :: message :: fix=..."""
        where = f"chunk={'-' if self.chunk is None else self.chunk} connector={self.connector or '-'}"
        return f"[{self.severity}] {self.code} {where} :: {self.message} :: fix={self.remediation or 'N/A'}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'severity': str(self.severity),
            'code': self.code,
            'message': self.message,
            'rule_reference': self.rule_reference,
            'remediation': self.remediation,
            'chunk': self.chunk,
            'connector': self.connector,
        }

    def __str__(self) -> str:
        return self.format()


@dataclass
class ValidationResult:
    """Issues collected by one or more checks."""
    issues: List[ValidationIssue] = field(default_factory=list)
    stage: Optional[ValidationStage] = None

    def by_severity(self, severity: Severity) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity is severity]

    @property
    def passed(self) -> bool:
        """True while no FAIL issue has been recorded."""
        return not self.by_severity(Severity.FAIL)

    @property
    def failed(self) -> bool:
        return not self.passed

    @property
    def errors(self) -> List[ValidationIssue]:
        return self.by_severity(Severity.FAIL)

    @property
    def warnings(self) -> List[ValidationIssue]:
        return self.by_severity(Severity.WARN)

    @property
    def infos(self) -> List[ValidationIssue]:
        return self.by_severity(Severity.INFO)

    def add_issue(self, issue: ValidationIssue) -> None:
        self.issues.append(issue)

    def codes(self) -> List[str]:
        return [i.code for i in self.issues]

    def report(self) -> str:
        """Multi-line report, worst issues first."""
        if not self.issues:
            return "Maze validation passed with no issues"

        header = "PASSED" if self.passed else "FAILED"
        if self.stage is not None:
            header += f" at {self.stage}"
        lines = [f"Maze validation {header}: {len(self.issues)} issue(s)"]
        for severity in (Severity.FAIL, Severity.WARN, Severity.INFO):
            found = self.by_severity(severity)
            if not found:
                continue
            lines.append(f"{severity} x{len(found)}")
            lines.extend(f"  {issue.format()}" for issue in found)
        return "\n".join(lines)

    def raise_if_failed(self) -> None:
        if self.failed:
            raise ValidationError(self)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready summary plus every issue."""
        return {
            'passed': self.passed,
            'stage': None if self.stage is None else str(self.stage),
            'issue_count': len(self.issues),
            'fail_count': len(self.errors),
            'warn_count': len(self.warnings),
            'info_count': len(self.infos),
            'issues': [issue.to_dict() for issue in self.issues],
        }


class ValidationError(Exception):
    """A result with FAIL issues was required to pass; ``result`` holds it."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(result.report())
