#!/usr/bin/env python
"""Cap each source module at 300 code lines.

Blank lines, comment-only lines and docstrings do not count. Package
`__init__.py` files that only re-export names are skipped.
"""

from __future__ import annotations

import ast
import io
import sys
import tokenize
from pathlib import Path

MODULE_LIMIT = 300

ROOT = Path(__file__).resolve().parents[1]


def ignored_lines(source: str, tree: ast.Module) -> set[int]:
    """Line numbers holding only a comment or part of a docstring."""
    ignored: set[int] = set()
    try:
        for token in tokenize.generate_tokens(io.StringIO(source).readline):
            if token.type == tokenize.COMMENT:
                ignored.add(token.start[0])
    except tokenize.TokenError:
        pass
    for node in ast.walk(tree):
        if not isinstance(node, (ast.Module, ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
            continue
        first = node.body[0] if node.body else None
        if isinstance(first, ast.Expr) and isinstance(first.value, ast.Constant) and isinstance(first.value.value, str):
            ignored.update(range(first.lineno, first.end_lineno + 1))
    return ignored


def _reexports_only(tree: ast.Module) -> bool:
    for node in tree.body:
        if isinstance(node, (ast.Import, ast.ImportFrom, ast.Pass)):
            continue
        if isinstance(node, ast.Expr) and isinstance(node.value, ast.Constant):
            continue
        if isinstance(node, ast.Assign) and [getattr(t, "id", None) for t in node.targets] == ["__all__"]:
            continue
        return False
    return True


def code_lines(source: str, tree: ast.Module) -> int:
    ignored = ignored_lines(source, tree)
    return sum(1 for number, line in enumerate(source.splitlines(), start=1) if line.strip() and number not in ignored)


def collect_violations(root: Path = ROOT) -> list[str]:
    violations: list[str] = []
    for path in sorted((root / "src").rglob("*.py")):
        if "__pycache__" in path.parts:
            continue
        try:
            source = path.read_text(encoding="utf-8")
            tree = ast.parse(source, filename=str(path))
        except (OSError, UnicodeDecodeError, SyntaxError):
            continue
        if path.name == "__init__.py" and _reexports_only(tree):
            continue
        size = code_lines(source, tree)
        if size > MODULE_LIMIT:
            violations.append(f"  {path.relative_to(root)}: {size} code lines (limit {MODULE_LIMIT})")
    return violations


def main() -> int:
    violations = collect_violations()
    if not violations:
        return 0
    print("Module length violations:", file=sys.stderr)
    for violation in violations:
        print(violation, file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
