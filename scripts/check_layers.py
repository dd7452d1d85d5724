#!/usr/bin/env python3
"""Check layer boundaries and direct clock reads in src/.

Two rules are enforced:

1. Import boundaries (hexagonal layering):
   - domain/: Pure records and functions, NO imports from other src layers
   - application/: Ports and services, may import from domain/ only
   - config/: Configuration, may import from domain/ only
   - infrastructure/: Port implementations, may import domain/ and application/
   - bootstrap/: Composition root, may import every layer

2. No direct clock reads: datetime.now(), datetime.utcnow(), time.time()
   and time.monotonic() are only allowed in the SystemTimeAuthority
   adapter. Everything else receives time through TimeAuthorityProtocol,
   which keeps countdown behaviour deterministic under FakeTimeAuthority.

Usage:
    python scripts/check_layers.py [src_directory]

Exit codes:
    0: No violations found
    1: Violations found
"""
import ast
import re
import sys
from pathlib import Path

ALLOWED_IMPORTS: dict[str, set[str]] = {
    "domain": set(),
    "application": {"domain"},
    "config": {"domain"},
    "infrastructure": {"domain", "application"},
    "bootstrap": {"domain", "application", "infrastructure", "config"},
}

CLOCK_PATTERN = re.compile(
    r"(datetime\s*\.\s*(now|utcnow)|time\s*\.\s*(time|monotonic))\s*\("
)

# Relative to the src directory
CLOCK_ALLOWED_FILES = {
    "infrastructure/adapters/system_time_authority.py",
}

Violation = tuple[str, int, str]


def get_import_module(node: ast.Import | ast.ImportFrom) -> str | None:
    """Extract the module name from an import statement."""
    if isinstance(node, ast.ImportFrom):
        return node.module
    if isinstance(node, ast.Import) and node.names:
        return node.names[0].name
    return None


def get_file_layer(py_file: Path, src_dir: Path) -> str | None:
    """Return the layer a file belongs to, or None outside known layers."""
    try:
        parts = py_file.relative_to(src_dir).parts
    except ValueError:
        return None
    if len(parts) < 2:
        return None
    return parts[0] if parts[0] in ALLOWED_IMPORTS else None


def check_import(module: str, file_layer: str) -> str | None:
    """Return an error message if importing ``module`` crosses a boundary."""
    if not module.startswith("src."):
        return None
    target_layer = module.split(".")[1]
    if target_layer not in ALLOWED_IMPORTS or target_layer == file_layer:
        return None
    if target_layer not in ALLOWED_IMPORTS[file_layer]:
        return f"{file_layer} layer cannot import from {target_layer}"
    return None


def check_file_imports(py_file: Path, src_dir: Path) -> list[Violation]:
    """Check a single file for import boundary violations."""
    file_layer = get_file_layer(py_file, src_dir)
    if file_layer is None:
        return []

    try:
        tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
    except (SyntaxError, UnicodeDecodeError) as e:
        print(f"Warning: Could not parse {py_file}: {e}", file=sys.stderr)
        return []

    violations: list[Violation] = []
    for node in ast.walk(tree):
        if isinstance(node, (ast.Import, ast.ImportFrom)):
            module = get_import_module(node)
            if module:
                message = check_import(module, file_layer)
                if message:
                    violations.append((str(py_file), node.lineno, message))
    return violations


def check_file_clock(py_file: Path, src_dir: Path) -> list[Violation]:
    """Check a single file for direct wall-clock reads."""
    if py_file.relative_to(src_dir).as_posix() in CLOCK_ALLOWED_FILES:
        return []
    try:
        content = py_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return []

    violations: list[Violation] = []
    for line_num, line in enumerate(content.splitlines(), start=1):
        if line.lstrip().startswith("#"):
            continue
        if CLOCK_PATTERN.search(line):
            violations.append(
                (str(py_file), line_num, "direct clock read; inject TimeAuthorityProtocol")
            )
    return violations


def check_src(src_dir: Path) -> list[Violation]:
    """Run both checks over every Python file under ``src_dir``."""
    violations: list[Violation] = []
    if not src_dir.exists():
        print(f"Error: Source directory '{src_dir}' does not exist", file=sys.stderr)
        return violations

    for py_file in sorted(src_dir.rglob("*.py")):
        violations.extend(check_file_imports(py_file, src_dir))
        violations.extend(check_file_clock(py_file, src_dir))
    return violations


def format_violations(violations: list[Violation]) -> str:
    """Format violations for human-readable output."""
    if not violations:
        return ""
    lines = ["Layer violations found:", ""]
    for file_path, line_no, message in sorted(violations):
        lines.append(f"  {file_path}:{line_no}: {message}")
    lines.append("")
    lines.append(f"Total: {len(violations)} violation(s)")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        0 if no violations, 1 if violations found
    """
    args = sys.argv[1:] if argv is None else argv
    if args:
        src_dir = Path(args[0])
    else:
        src_dir = Path(__file__).parent.parent / "src"

    violations = check_src(src_dir)
    if violations:
        print(format_violations(violations))
        return 1
    print("No layer violations found.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
