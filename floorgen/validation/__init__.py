"""
Layout validation package.

Public API:
    - ValidationResult, ValidationIssue, Severity: Core result types
    - ValidationStage: When the validation ran
    - ValidationError: Raised on FAIL issues when fail_fast=True
    - validate_floor_layout(): Run every whole-floor check
    - room_overlap_report(): Text diagnostics for a placed floor
"""

from .core import (
    Severity,
    ValidationStage,
    ValidationIssue,
    ValidationResult,
    ValidationError,
)
from .checks import room_overlap_report, validate_floor_layout

__all__ = [
    'Severity',
    'ValidationStage',
    'ValidationIssue',
    'ValidationResult',
    'ValidationError',
    'room_overlap_report',
    'validate_floor_layout',
]
