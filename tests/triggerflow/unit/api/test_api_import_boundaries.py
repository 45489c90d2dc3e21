from __future__ import annotations

import ast
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[4]


def _iter_python_files(base: Path) -> list[Path]:
    files: list[Path] = []
    for path in base.rglob("*.py"):
        if "__pycache__" in path.parts:
            continue
        files.append(path)
    return files


def _collect_import_targets(path: Path, *, top_level_only: bool) -> list[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    nodes = tree.body if top_level_only else list(ast.walk(tree))
    targets: list[str] = []
    for node in nodes:
        if isinstance(node, ast.Import):
            for alias in node.names:
                targets.append(alias.name)
        elif isinstance(node, ast.ImportFrom) and node.module is not None:
            targets.append(node.module)
    return targets


def test_api_has_no_top_level_runtime_imports() -> None:
    violations: list[str] = []
    for path in _iter_python_files(REPO_ROOT / "triggerflow" / "api"):
        for target in _collect_import_targets(path, top_level_only=True):
            if target.startswith("triggerflow.runtime"):
                violations.append(f"{path.relative_to(REPO_ROOT)} -> {target}")
    assert not violations, "triggerflow.api top-level imports must not depend on runtime:\n" + "\n".join(
        violations
    )


def test_diagnostics_does_not_import_machine_code() -> None:
    violations: list[str] = []
    for path in _iter_python_files(REPO_ROOT / "triggerflow" / "diagnostics"):
        for target in _collect_import_targets(path, top_level_only=False):
            if target.startswith(("triggerflow.runtime", "triggerflow.api")):
                violations.append(f"{path.relative_to(REPO_ROOT)} -> {target}")
    assert not violations, "diagnostics must stay independent:\n" + "\n".join(violations)
