"""
Validation package for generated mazes.

Public API:
    - ValidationResult, ValidationIssue, Severity: Core result types
    - ValidationStage: Generation stage enumeration
    - ValidationError: Raised by ValidationResult.raise_if_failed()
    - validate_maze(): Post-hoc growth invariant checks
"""

from .core import (
    Severity,
    ValidationError,
    ValidationIssue,
    ValidationResult,
    ValidationStage,
)
from .rules import ALL_RULES, ValidationRule, get_rule, get_rules_by_category
from .maze_checks import issue_from_rule, validate_maze

__all__ = [
    'Severity',
    'ValidationError',
    'ValidationIssue',
    'ValidationResult',
    'ValidationStage',
    'ALL_RULES',
    'ValidationRule',
    'get_rule',
    'get_rules_by_category',
    'issue_from_rule',
    'validate_maze',
]
