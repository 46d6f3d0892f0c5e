"""
Kernel and engine boundary contract.

Tests that enforce the layering:

1. succession_kernel/** may NOT import succession_engines,
   succession_services or succession_config. The kernel never depends
   upward.

2. succession_engines/** may NOT import succession_services or
   succession_config, and may not read files or the clock.

3. The invariants declaration is complete and non-empty.

These tests read source code via AST -- they cannot break anything.
"""

import ast
import glob
from pathlib import Path

from succession_kernel.invariants import (
    ALL_SUCCESSION_INVARIANTS,
    FORBIDDEN_ENGINE_IMPORTS,
    FORBIDDEN_KERNEL_IMPORTS,
    SuccessionInvariant,
)

ROOT = Path(__file__).resolve().parents[2]

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _python_files(package: str) -> list[str]:
    """Return all .py files under a top-level package."""
    return sorted(glob.glob(str(ROOT / package / "**" / "*.py"), recursive=True))


def _extract_imports(filepath: str) -> list[tuple[int, str]]:
    """Extract (line_number, module_string) for all imports in a file."""
    source = Path(filepath).read_text(encoding="utf-8")
    tree = ast.parse(source, filename=filepath)

    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                results.append((node.lineno, node.module))
    return results


def _violations(package: str, forbidden: tuple[str, ...]) -> list[str]:
    found: list[str] = []
    for filepath in _python_files(package):
        for lineno, module in _extract_imports(filepath):
            for prefix in forbidden:
                if module == prefix or module.startswith(f"{prefix}."):
                    found.append(f"  {filepath}:{lineno} imports '{module}'")
    return found


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestKernelNoUpwardDependencies:
    def test_kernel_files_found(self):
        assert _python_files("succession_kernel")

    def test_kernel_does_not_import_forbidden_packages(self):
        violations = _violations("succession_kernel", FORBIDDEN_KERNEL_IMPORTS)
        assert not violations, (
            "Kernel boundary violation -- succession_kernel/** must not import "
            "engines, services or config:\n" + "\n".join(violations)
        )


class TestEnginePurity:
    IO_MODULES = ("pathlib", "yaml", "os")

    def test_engines_do_not_import_upward(self):
        violations = _violations("succession_engines", FORBIDDEN_ENGINE_IMPORTS)
        assert not violations, (
            "Engine boundary violation:\n" + "\n".join(violations)
        )

    def test_engines_do_no_io(self):
        violations = _violations("succession_engines", self.IO_MODULES)
        assert not violations, "Engines must stay I/O free:\n" + "\n".join(violations)

    def test_engines_do_not_read_wall_clock(self):
        offenders: list[str] = []
        for filepath in _python_files("succession_engines"):
            source = Path(filepath).read_text(encoding="utf-8")
            if "datetime.now(" in source or "date.today(" in source:
                offenders.append(filepath)
        assert not offenders, f"Engines must not read the wall clock: {offenders}"


class TestInvariantsDeclaration:
    def test_all_invariants_listed(self):
        assert ALL_SUCCESSION_INVARIANTS == frozenset(SuccessionInvariant)
        assert len(ALL_SUCCESSION_INVARIANTS) >= 6

    def test_every_invariant_documented(self):
        source = (ROOT / "succession_kernel" / "invariants.py").read_text(encoding="utf-8")
        for invariant in SuccessionInvariant:
            assert f'{invariant.name} = "{invariant.value}"' in source
