"""
Core data structures for layout validation.

Defines the fundamental types used throughout the validation package:
- Severity: Issue severity levels (INFO, WARN, FAIL)
- ValidationStage: When the validation ran
- ValidationIssue: Individual validation finding
- ValidationResult: Collection of issues with pass/fail status
- ValidationError: Exception raised when validation fails
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional


class Severity(Enum):
    """Validation issue severity levels.

    Only FAIL decides pass/fail; the generator reports FAIL issues as
    result warnings rather than discarding the floor.

    - INFO: Informational, logged but doesn't affect pass/fail
    - WARN: Warning, logged but doesn't reject the layout
    - FAIL: Error, the layout breaks a placement guarantee
    """
    INFO = auto()
    WARN = auto()
    FAIL = auto()

    def __str__(self) -> str:
        return self.name


class ValidationStage(Enum):
    """Points at which a floor layout is validated.

    - PLACEMENT: Checking a single candidate placement
    - GENERATION: After a full generation pass
    - REPLAY: After a cached layout was replayed
    """
    PLACEMENT = "placement"
    GENERATION = "generation"
    REPLAY = "replay"

    def __str__(self) -> str:
        return self.value


@dataclass
class ValidationIssue:
    """Represents a single validation finding.

    Issues are built through ValidationRule.issue() so that code, severity
    and remediation always match the rule definition.

    Attributes:
        severity: Issue severity (INFO, WARN, FAIL)
        code: Rule code (e.g., "LAYOUT-001")
        message: Human-readable description
        rule_reference: Guarantee the rule enforces
        remediation: Optional suggested fix
        room: Optional room instance name
        socket: Optional socket name
        transform: Optional transform info
    """
    severity: Severity
    code: str
    message: str
    rule_reference: str
    remediation: Optional[str] = None
    room: Optional[str] = None
    socket: Optional[str] = None
    transform: Optional[str] = None

    def format(self) -> str:
        """Format issue for display.

        Missing location fields are shown as "-", a missing fix as "N/A".

        Returns:
            Formatted string:
            [SEVERITY] RULE_ID room=R socket=S transform=T :: message :: fix=FIX
        """
        room = self.room or '-'
        socket = self.socket or '-'
        transform = self.transform or '-'
        fix = self.remediation or 'N/A'

        return (
            f"[{self.severity}] {self.code} "
            f"room={room} socket={socket} transform={transform} :: "
            f"{self.message} :: fix={fix}"
        )

    def __str__(self) -> str:
        return self.format()


@dataclass
class ValidationResult:
    """Collection of validation issues with pass/fail determination.

    Attributes:
        issues: List of ValidationIssue objects, in the order found
        stage: Stage this result is from

    Properties:
        passed: True if no FAIL severity issues
        failed: True if any FAIL severity issues
        warnings: List of WARN severity issues
        errors: List of FAIL severity issues
        infos: List of INFO severity issues
    """
    issues: List[ValidationIssue] = field(default_factory=list)
    stage: Optional[ValidationStage] = None

    @property
    def passed(self) -> bool:
        """Check if validation passed (no FAIL issues)."""
        return not any(i.severity == Severity.FAIL for i in self.issues)

    @property
    def failed(self) -> bool:
        """Check if validation failed (any FAIL issues)."""
        return not self.passed

    @property
    def warnings(self) -> List[ValidationIssue]:
        """Get all WARN severity issues."""
        return [i for i in self.issues if i.severity == Severity.WARN]

    @property
    def errors(self) -> List[ValidationIssue]:
        """Get all FAIL severity issues."""
        return [i for i in self.issues if i.severity == Severity.FAIL]

    @property
    def infos(self) -> List[ValidationIssue]:
        """Get all INFO severity issues."""
        return [i for i in self.issues if i.severity == Severity.INFO]

    def add_issue(self, issue: ValidationIssue) -> None:
        """Add an issue to the result."""
        self.issues.append(issue)

    def merge(self, other: 'ValidationResult') -> 'ValidationResult':
        """Merge another result into this one.

        Args:
            other: ValidationResult to merge

        Returns:
            Self for chaining
        """
        self.issues.extend(other.issues)
        return self

    def codes(self) -> List[str]:
        """Rule codes of all issues, in the order found."""
        return [i.code for i in self.issues]

    def report(self) -> str:
        """Generate a formatted report of all issues.

        Returns:
            Multi-line string with issues grouped FAIL, WARN, then INFO
        """
        if not self.issues:
            return "Validation passed: No issues found"

        lines = []
        stage_str = f" ({self.stage})" if self.stage else ""
        status = "PASSED" if self.passed else "FAILED"
        lines.append(f"Validation {status}{stage_str}: {len(self.issues)} issue(s)")
        lines.append("-" * 60)

        # Group by severity
        for severity in [Severity.FAIL, Severity.WARN, Severity.INFO]:
            severity_issues = [i for i in self.issues if i.severity == severity]
            if severity_issues:
                lines.append(f"\n{severity.name} ({len(severity_issues)}):")
                for issue in severity_issues:
                    lines.append(issue.format())

        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'passed': self.passed,
            'stage': str(self.stage) if self.stage else None,
            'issue_count': len(self.issues),
            'fail_count': len(self.errors),
            'warn_count': len(self.warnings),
            'info_count': len(self.infos),
            'issues': [
                {
                    'severity': str(issue.severity),
                    'code': issue.code,
                    'message': issue.message,
                    'rule_reference': issue.rule_reference,
                    'remediation': issue.remediation,
                    'room': issue.room,
                    'socket': issue.socket,
                    'transform': issue.transform,
                }
                for issue in self.issues
            ]
        }


class ValidationError(Exception):
    """Exception raised when validation fails with FAIL severity issues.

    Attributes:
        result: The ValidationResult that caused the failure
    """

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(result.report())
