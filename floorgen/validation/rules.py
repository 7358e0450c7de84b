"""
Validation rule definitions.

Rules are organized by category:
- LAYOUT: Room overlap
- SOCK: Socket connection state
- EXIT: Exit placement and reachability
- CRED: Door credit accounting
"""

from dataclasses import dataclass
from typing import Dict, Optional

from .core import Severity, ValidationIssue


@dataclass(frozen=True)
class ValidationRule:
    """Definition of a validation rule.

    Attributes:
        code: Unique rule code (e.g., "LAYOUT-001")
        severity: Default severity for this rule
        rule_reference: Guarantee the rule enforces
        message_template: Template for error message (use {placeholders})
        remediation_template: Template for suggested fix
    """
    code: str
    severity: Severity
    rule_reference: str
    message_template: str
    remediation_template: Optional[str] = None

    def format_message(self, **kwargs) -> str:
        return self.message_template.format(**kwargs)

    def issue(self, room: Optional[str] = None, socket: Optional[str] = None,
              transform: Optional[str] = None, **kwargs) -> ValidationIssue:
        """Build an issue for this rule with the message filled in."""
        return ValidationIssue(
            severity=self.severity,
            code=self.code,
            message=self.format_message(room=room, socket=socket, **kwargs),
            rule_reference=self.rule_reference,
            remediation=self.remediation_template,
            room=room,
            socket=socket,
            transform=transform,
        )


LAYOUT_001 = ValidationRule(
    code="LAYOUT-001",
    severity=Severity.FAIL,
    rule_reference="Rooms that are not directly connected never overlap",
    message_template="{room_a} overlaps {room_b}",
    remediation_template="Check template bounds and socket insets",
)

LAYOUT_002 = ValidationRule(
    code="LAYOUT-002",
    severity=Severity.FAIL,
    rule_reference="Connected rooms overlap at most the configured fraction of the smaller footprint",
    message_template="{room_a} and {room_b} overlap {fraction:.1%} (max {limit:.1%})",
    remediation_template="Reduce the doorway frame depth of the templates involved",
)

SOCK_001 = ValidationRule(
    code="SOCK-001",
    severity=Severity.FAIL,
    rule_reference="Connected sockets point at each other and both report connected",
    message_template="Socket link is not symmetric: {details}",
)

EXIT_001 = ValidationRule(
    code="EXIT-001",
    severity=Severity.FAIL,
    rule_reference="A finished floor has exactly one exit room",
    message_template="Expected exactly one exit room, found {count}",
)

EXIT_002 = ValidationRule(
    code="EXIT-002",
    severity=Severity.FAIL,
    rule_reference="The exit room is reachable from the start room",
    message_template="Exit room {room} is not reachable from {start}",
)

CRED_001 = ValidationRule(
    code="CRED-001",
    severity=Severity.FAIL,
    rule_reference="connections_made == budget - credits_remaining",
    message_template="Credit mismatch: {connections} connections, budget {budget}, {remaining} remaining",
)


ALL_RULES: Dict[str, ValidationRule] = {
    rule.code: rule
    for rule in (LAYOUT_001, LAYOUT_002, SOCK_001, EXIT_001, EXIT_002, CRED_001)
}
