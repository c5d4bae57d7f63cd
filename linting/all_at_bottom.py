#!/usr/bin/env python
"""Require `__all__` to be one literal assignment and the last top-level statement.

Modules that never mention `__all__` are skipped. Augmented assignments,
`__all__.append(...)` style mutations and a second assignment are rejected.
"""

from __future__ import annotations

import ast
import sys
import argparse
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
DEFAULT_DIRS = ("src", "tests")


def _names_all(node: ast.AST) -> bool:
    return isinstance(node, ast.Name) and node.id == "__all__"


def _is_plain_assignment(node: ast.stmt) -> bool:
    if isinstance(node, ast.Assign):
        return len(node.targets) == 1 and _names_all(node.targets[0])
    return isinstance(node, ast.AnnAssign) and _names_all(node.target) and node.value is not None


def _touches_all(node: ast.stmt) -> bool:
    if isinstance(node, ast.Assign):
        return any(_names_all(target) for target in node.targets)
    if isinstance(node, (ast.AnnAssign, ast.AugAssign)):
        return _names_all(node.target)
    if isinstance(node, ast.Delete):
        return any(_names_all(target) for target in node.targets)
    if isinstance(node, ast.Expr) and isinstance(node.value, ast.Call):
        func = node.value.func
        return isinstance(func, ast.Attribute) and _names_all(func.value)
    return False


def _label(node: ast.stmt) -> str:
    name = getattr(node, "name", None)
    if name:
        return f"{type(node).__name__} `{name}`"
    return type(node).__name__


def module_violations(tree: ast.Module, rel: Path) -> list[str]:
    assignments = [(i, n) for i, n in enumerate(tree.body) if _is_plain_assignment(n)]
    stray = [n for n in tree.body if _touches_all(n) and not _is_plain_assignment(n)]
    if not assignments and not stray:
        return []

    violations = [f"  {rel}:{n.lineno} `__all__` must only be set by one assignment" for n in stray]
    if len(assignments) != 1:
        violations.extend(f"  {rel}:{n.lineno} repeated `__all__` assignment" for _, n in assignments)
        return violations

    index, node = assignments[0]
    if any(_names_all(n) for n in ast.walk(node.value)):
        violations.append(f"  {rel}:{node.lineno} `__all__` refers to itself")
    violations.extend(f"  {rel}:{n.lineno} {_label(n)} after `__all__`" for n in tree.body[index + 1 :])
    return violations


def collect_violations(root: Path = ROOT, dirs: tuple[str, ...] = DEFAULT_DIRS) -> list[str]:
    violations: list[str] = []
    for name in dirs:
        base = root / name
        if not base.is_dir():
            continue
        for path in sorted(base.rglob("*.py")):
            if "__pycache__" in path.parts:
                continue
            try:
                tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
            except (OSError, UnicodeDecodeError, SyntaxError):
                continue
            violations.extend(module_violations(tree, path.relative_to(root)))
    return violations


def main() -> int:
    parser = argparse.ArgumentParser(description="Check that __all__ is a single assignment at module bottom.")
    parser.add_argument("--dirs", nargs="+", default=list(DEFAULT_DIRS), help="directories to scan")
    args = parser.parse_args()

    violations = collect_violations(ROOT, tuple(args.dirs))
    if not violations:
        return 0
    print("__all__ placement violations:", file=sys.stderr)
    for violation in violations:
        print(violation, file=sys.stderr)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
