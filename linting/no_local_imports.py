#!/usr/bin/env python
"""Keep imports at module scope in the serving packages.

An import inside a function or class body is a lazy load; the relay, the
Gemini adapters and the synthesis tiers must fail at startup instead.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
TARGET_PACKAGES = ("runtime", "realtime", "gemini", "synthesis")


def nested_imports(tree: ast.Module) -> list[int]:
    """Line numbers of imports that sit below a def or class."""
    found: list[int] = []
    for scope in ast.walk(tree):
        if not isinstance(scope, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            continue
        for node in ast.walk(scope):
            if isinstance(node, (ast.Import, ast.ImportFrom)):
                found.append(node.lineno)
    return sorted(set(found))


def collect_violations(root: Path = ROOT) -> list[str]:
    violations: list[str] = []
    for package in TARGET_PACKAGES:
        base = root / "src" / package
        if not base.is_dir():
            continue
        for path in sorted(base.rglob("*.py")):
            if "__pycache__" in path.parts:
                continue
            try:
                tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
            except (OSError, UnicodeDecodeError, SyntaxError):
                continue
            rel = path.relative_to(root)
            violations.extend(f"  {rel}:{line} local import is forbidden" for line in nested_imports(tree))
    return violations


def main() -> int:
    violations = collect_violations()
    if not violations:
        return 0
    print("Local import violations:", file=sys.stderr)
    for violation in violations:
        print(violation, file=sys.stderr)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
