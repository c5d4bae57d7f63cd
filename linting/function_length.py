#!/usr/bin/env python
"""Cap every function and method under src/ at 60 code lines.

Counting follows file_length.py: blank lines, comment-only lines and
docstrings are excluded. Nested functions are reported on their own and also
count toward the enclosing function.
"""

from __future__ import annotations

import ast
import io
import sys
import tokenize
from pathlib import Path
from collections.abc import Iterator

FUNCTION_LIMIT = 60

ROOT = Path(__file__).resolve().parents[1]

FunctionNode = ast.FunctionDef | ast.AsyncFunctionDef


def _walk_functions(node: ast.AST, scope: tuple[str, ...] = ()) -> Iterator[tuple[str, FunctionNode]]:
    for child in ast.iter_child_nodes(node):
        if isinstance(child, (ast.FunctionDef, ast.AsyncFunctionDef)):
            yield ".".join((*scope, child.name)), child
            yield from _walk_functions(child, (*scope, child.name))
        elif isinstance(child, ast.ClassDef):
            yield from _walk_functions(child, (*scope, child.name))
        else:
            yield from _walk_functions(child, scope)


def _skipped_lines(source: str, tree: ast.Module) -> set[int]:
    skipped: set[int] = set()
    try:
        for token in tokenize.generate_tokens(io.StringIO(source).readline):
            if token.type == tokenize.COMMENT:
                skipped.add(token.start[0])
    except tokenize.TokenError:
        pass
    for node in ast.walk(tree):
        body = getattr(node, "body", None)
        if not isinstance(node, (ast.Module, ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)) or not body:
            continue
        first = body[0]
        if isinstance(first, ast.Expr) and isinstance(first.value, ast.Constant) and isinstance(first.value.value, str):
            skipped.update(range(first.lineno, first.end_lineno + 1))
    return skipped


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
        lines = source.splitlines()
        skipped = _skipped_lines(source, tree)
        for qualified, node in _walk_functions(tree):
            span = range(node.lineno, node.end_lineno + 1)
            size = sum(1 for n in span if n not in skipped and lines[n - 1].strip())
            if size > FUNCTION_LIMIT:
                rel = path.relative_to(root)
                violations.append(f"  {rel}:{node.lineno} {qualified} -> {size} code lines (limit {FUNCTION_LIMIT})")
    return violations


def main() -> int:
    violations = collect_violations()
    if not violations:
        return 0
    print("Function length violations:", file=sys.stderr)
    for violation in violations:
        print(violation, file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
