#!/usr/bin/env python
"""Allow at most one top-level class per source module, not counting dataclasses.

Protocols, enums and exception hierarchies all count as classes; give each
contract its own module. Dataclass records (including dataclass exceptions)
may share a module freely.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def _decorator_name(decorator: ast.expr) -> str | None:
    if isinstance(decorator, ast.Call):
        decorator = decorator.func
    if isinstance(decorator, ast.Name):
        return decorator.id
    if isinstance(decorator, ast.Attribute):
        return decorator.attr
    return None


def counted_classes(tree: ast.Module) -> list[str]:
    names: list[str] = []
    for node in tree.body:
        if not isinstance(node, ast.ClassDef):
            continue
        if any(_decorator_name(d) == "dataclass" for d in node.decorator_list):
            continue
        names.append(node.name)
    return names


def collect_violations(root: Path = ROOT) -> list[str]:
    violations: list[str] = []
    for path in sorted((root / "src").rglob("*.py")):
        if "__pycache__" in path.parts:
            continue
        try:
            tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
        except (OSError, UnicodeDecodeError, SyntaxError):
            continue
        names = counted_classes(tree)
        if len(names) > 1:
            violations.append(f"  {path.relative_to(root)}: {len(names)} classes ({', '.join(names)})")
    return violations


def main() -> int:
    violations = collect_violations()
    if not violations:
        return 0
    print("More than one non-dataclass class per module:", file=sys.stderr)
    for violation in violations:
        print(violation, file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
