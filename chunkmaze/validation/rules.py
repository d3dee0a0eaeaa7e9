"""
Validation rule definitions for generated mazes.

Each rule has a code, a default severity, the invariant it guards, a
message template and an optional remediation hint.

Rules are organized by category:
- MAZE: Growth invariants (depth, frontier, links, overlap)
- SEL: Post-growth selection
- POP: Population
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .core import Severity


@dataclass(frozen=True)
class ValidationRule:
    """Definition of a validation rule."""
    code: str
    severity: Severity
    rule_reference: str
    message_template: str
    remediation_template: Optional[str] = None

    def format_message(self, **kwargs) -> str:
        return self.message_template.format(**kwargs)

    def format_remediation(self, **kwargs) -> Optional[str]:
        if self.remediation_template:
            return self.remediation_template.format(**kwargs)
        return None


# =============================================================================
# GROWTH RULES (MAZE)
# =============================================================================

MAZE_001 = ValidationRule(
    code="MAZE-001",
    severity=Severity.FAIL,
    rule_reference="Depth bound",
    message_template="Depth {depth} exceeds depth budget {budget}",
)

MAZE_002 = ValidationRule(
    code="MAZE-002",
    severity=Severity.FAIL,
    rule_reference="Depth counts commits",
    message_template="Depth {depth} does not match {commits} committed placements",
)

MAZE_003 = ValidationRule(
    code="MAZE-003",
    severity=Severity.FAIL,
    rule_reference="Frontier integrity",
    message_template="Frontier socket {ref} {problem}",
    remediation_template="Only unconsumed sockets of placed chunks may stay open",
)

MAZE_004 = ValidationRule(
    code="MAZE-004",
    severity=Severity.FAIL,
    rule_reference="No overlap",
    message_template="Chunks {a} and {b} overlap by {distance:.2f} (margin {margin:.2f})",
    remediation_template="Check the overlap oracle and collision volumes",
)

MAZE_005 = ValidationRule(
    code="MAZE-005",
    severity=Severity.FAIL,
    rule_reference="Link integrity",
    message_template="Link {parent} -> {child} {problem}",
)

MAZE_006 = ValidationRule(
    code="MAZE-006",
    severity=Severity.INFO,
    rule_reference="Budget exhaustion",
    message_template="Depth budget {budget} reached with {open_count} socket(s) left open",
)

# =============================================================================
# SELECTION RULES (SEL)
# =============================================================================

SEL_001 = ValidationRule(
    code="SEL-001",
    severity=Severity.WARN,
    rule_reference="Selection exhaustion",
    message_template="{role} search hit the {attempts}-attempt cap; using ineligible socket {ref}",
    remediation_template="Increase selection_max_attempts or the depth budget",
)

SEL_002 = ValidationRule(
    code="SEL-002",
    severity=Severity.WARN,
    rule_reference="Exit decoration",
    message_template="Exit socket {ref} has no dead-end marker to decorate",
)

# =============================================================================
# POPULATION RULES (POP)
# =============================================================================

POP_001 = ValidationRule(
    code="POP-001",
    severity=Severity.FAIL,
    rule_reference="Missing required asset",
    message_template="{asset} not assigned!",
    remediation_template="Provide the {asset} in the AssetCatalog",
)


ALL_RULES: Dict[str, ValidationRule] = {
    rule.code: rule
    for rule in (MAZE_001, MAZE_002, MAZE_003, MAZE_004, MAZE_005, MAZE_006,
                 SEL_001, SEL_002, POP_001)
}


def get_rule(code: str) -> Optional[ValidationRule]:
    return ALL_RULES.get(code)


def get_rules_by_category(prefix: str) -> List[ValidationRule]:
    return [r for code, r in ALL_RULES.items() if code.startswith(prefix.upper() + "-")]
