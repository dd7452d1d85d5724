"""Unit tests for the layer boundary checking script.

Tests verify that the hexagonal architecture rules are enforced:
- domain/ imports NOTHING from other src layers
- application/ and config/ import from domain/ only
- infrastructure/ imports from domain/ and application/
- bootstrap/ may import every layer
- only the system clock adapter reads the wall clock
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent / "scripts"))

from check_layers import (  # noqa: E402
    ALLOWED_IMPORTS,
    check_file_clock,
    check_file_imports,
    check_import,
    check_src,
    format_violations,
    get_file_layer,
    main,
)

REPO_SRC = Path(__file__).parent.parent.parent.parent / "src"


def _write(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestAllowedImports:
    """Tests for the layer rules table."""

    def test_domain_imports_nothing(self) -> None:
        assert ALLOWED_IMPORTS["domain"] == set()

    def test_application_imports_domain_only(self) -> None:
        assert ALLOWED_IMPORTS["application"] == {"domain"}

    def test_bootstrap_imports_everything(self) -> None:
        assert ALLOWED_IMPORTS["bootstrap"] == {"domain", "application", "infrastructure", "config"}


class TestCheckImport:
    """Tests for single import checks."""

    def test_same_layer_allowed(self) -> None:
        assert check_import("src.domain.models.bloc", "domain") is None

    def test_third_party_ignored(self) -> None:
        assert check_import("structlog", "domain") is None

    def test_domain_importing_application(self) -> None:
        assert check_import("src.application.services", "domain") == (
            "domain layer cannot import from application"
        )

    def test_application_importing_infrastructure(self) -> None:
        assert check_import("src.infrastructure.stubs", "application") is not None


class TestFileChecks:
    """Tests for per-file checks."""

    def test_file_layer(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "domain/models/x.py", "")
        assert get_file_layer(path, tmp_path) == "domain"
        assert get_file_layer(_write(tmp_path, "top.py", ""), tmp_path) is None

    def test_import_violation_reported(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "domain/models/x.py",
            "from src.infrastructure.stubs import InMemoryDocumentStore\n",
        )
        violations = check_file_imports(path, tmp_path)
        assert len(violations) == 1
        assert violations[0][1] == 1

    def test_clock_read_reported(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "application/services/x.py",
            "from datetime import datetime\n# datetime.now() in a comment is fine\nnow = datetime.now()\n",
        )
        violations = check_file_clock(path, tmp_path)
        assert [line for _, line, _ in violations] == [3]

    def test_clock_allowed_in_adapter(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "infrastructure/adapters/system_time_authority.py",
            "import time\nvalue = time.monotonic()\n",
        )
        assert check_file_clock(path, tmp_path) == []


class TestCheckSrc:
    """Tests for the whole-tree run."""

    def test_repository_is_clean(self) -> None:
        """The real src/ tree has no violations."""
        assert check_src(REPO_SRC) == []

    def test_main_exit_codes(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        _write(tmp_path, "domain/ok.py", "import dataclasses\n")
        assert main([str(tmp_path)]) == 0

        _write(tmp_path, "config/bad.py", "from src.bootstrap.editor import get_editor_config\n")
        assert main([str(tmp_path)]) == 1
        assert "config layer cannot import from bootstrap" in capsys.readouterr().out

    def test_format_empty(self) -> None:
        assert format_violations([]) == ""
