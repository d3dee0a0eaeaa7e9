"""
Post-hoc checks on a grown maze.

Re-verifies the growth invariants from the outside:
- Depth within budget and equal to the number of commits (MAZE-001/002)
- Frontier only holds unconsumed sockets of placed chunks (MAZE-003)
- No chunk pair overlaps at or above the margin (MAZE-004)
- Every link joins two consumed sockets, one new chunk per link (MAZE-005)
- Budget exhaustion with open sockets is reported as INFO (MAZE-006)
"""

from typing import Optional

from ..growth.aligner import DEFAULT_OVERLAP_MARGIN
from ..growth.maze import Maze
from ..spatial.oracle import SpatialOracle
from .core import ValidationIssue, ValidationResult, ValidationStage
from .rules import MAZE_001, MAZE_002, MAZE_003, MAZE_004, MAZE_005, MAZE_006, ValidationRule


def issue_from_rule(rule: ValidationRule, chunk: Optional[int] = None,
                    connector: Optional[str] = None, **kwargs) -> ValidationIssue:
    """Build a ValidationIssue from a rule and its template values."""
    return ValidationIssue(
        severity=rule.severity,
        code=rule.code,
        message=rule.format_message(**kwargs),
        rule_reference=rule.rule_reference,
        remediation=rule.format_remediation(**kwargs),
        chunk=chunk,
        connector=connector,
    )


def validate_maze(maze: Maze, oracle: Optional[SpatialOracle] = None,
                  margin: float = DEFAULT_OVERLAP_MARGIN) -> ValidationResult:
    """Validate a grown maze.

    Args:
        maze: Maze to check
        oracle: Overlap oracle for the pairwise re-check; skipped when None
        margin: Penetration depth at which an overlap counts as a collision

    Returns:
        ValidationResult for the GROWTH stage
    """
    result = ValidationResult(stage=ValidationStage.GROWTH)

    if maze.depth > maze.depth_budget:
        result.add_issue(issue_from_rule(MAZE_001, depth=maze.depth, budget=maze.depth_budget))

    commits = max(len(maze.chunks) - 1, 0)
    if maze.depth != commits or maze.depth != len(maze.links):
        result.add_issue(issue_from_rule(MAZE_002, depth=maze.depth, commits=commits))

    for ref in maze.frontier:
        if ref.chunk >= len(maze.chunks) or ref.point >= len(maze.chunk(ref.chunk).connection_points):
            result.add_issue(issue_from_rule(
                MAZE_003, connector=str(tuple(ref)), ref=tuple(ref), problem="does not exist"))
        elif maze.point(ref).consumed:
            result.add_issue(issue_from_rule(
                MAZE_003, chunk=ref.chunk, connector=str(tuple(ref)),
                ref=tuple(ref), problem="is already consumed"))

    seen_children = set()
    for link in maze.links:
        problem = None
        if link.child.chunk in seen_children:
            problem = "reuses a chunk already linked"
        elif link.child.chunk <= link.parent.chunk:
            problem = "points backwards in placement order"
        elif not (maze.point(link.parent).consumed and maze.point(link.child).consumed):
            problem = "joins an unconsumed socket"
        seen_children.add(link.child.chunk)
        if problem:
            result.add_issue(issue_from_rule(
                MAZE_005, chunk=link.child.chunk,
                parent=tuple(link.parent), child=tuple(link.child), problem=problem))

    if oracle is not None:
        chunks = maze.chunks
        for i in range(len(chunks)):
            for j in range(i + 1, len(chunks)):
                report = oracle.overlap(chunks[i].template.collision, chunks[i].pose,
                                        chunks[j].template.collision, chunks[j].pose)
                if report.blocks(margin):
                    result.add_issue(issue_from_rule(
                        MAZE_004, chunk=j, a=i, b=j, distance=report.distance, margin=margin))

    if maze.budget_exhausted and maze.frontier:
        result.add_issue(issue_from_rule(
            MAZE_006, budget=maze.depth_budget, open_count=len(maze.frontier)))

    return result
