"""
Global pytest fixtures and configuration for test suite.

This module provides reusable fixtures for:
- Sample Java sources
- Removal targets
- Source trees on disk
- Settings with test defaults
"""

from pathlib import Path
from typing import Dict

import pytest
import structlog

from annotation_stripper.config import Settings
from annotation_stripper.models.targets import RemovalTargets
from tests.fixtures.java_sources import SAMPLE_SOURCES


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore the default structlog configuration after each test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def mock_settings() -> Settings:
    """
    Create settings for testing with safe defaults.

    Returns:
        Settings instance with test configuration
    """
    return Settings(
        log_level="INFO",
        log_json=False,  # Easier to read in tests
        max_workers=2,
        detect_encoding=True,
    )


@pytest.fixture
def nullness_targets() -> RemovalTargets:
    """
    Targets selecting the JSpecify nullness annotations by qualified name.

    Returns:
        RemovalTargets with two qualified names
    """
    return RemovalTargets.of(
        ["org.jspecify.annotations.Nullable", "org.jspecify.annotations.NonNull"]
    )


@pytest.fixture
def module_info_source() -> str:
    """Module declaration starting with @Deprecated."""
    return SAMPLE_SOURCES["module_info"]


@pytest.fixture
def unicode_escapes_source() -> str:
    """Source whose annotation markers are spelled as Unicode escapes."""
    return SAMPLE_SOURCES["unicode_escapes"]


@pytest.fixture
def unterminated_comment_source() -> str:
    """Source with a block comment that is never closed."""
    return SAMPLE_SOURCES["unterminated_comment"]


@pytest.fixture
def java_tree(tmp_path: Path) -> Dict[str, Path]:
    """
    Create a small source tree on disk.

    Layout:
        src/com/example/Service.java   (uses @Nullable)
        src/com/example/Plain.java     (no annotations)
        src/module-info.java           (@Deprecated module)
        src/notes.txt                  (not a Java source)

    Returns:
        Mapping of short names to created paths (plus "root")
    """
    root = tmp_path / "src"
    package = root / "com" / "example"
    package.mkdir(parents=True)

    service = package / "Service.java"
    service.write_text(SAMPLE_SOURCES["nullness_annotations"], encoding="utf-8")

    plain = package / "Plain.java"
    plain.write_text("package com.example;\n\nclass Plain {\n    int foo;\n}\n", encoding="utf-8")

    module_info = root / "module-info.java"
    module_info.write_text(SAMPLE_SOURCES["module_info"], encoding="utf-8")

    notes = root / "notes.txt"
    notes.write_text("@Nullable is not Java here\n", encoding="utf-8")

    return {
        "root": root,
        "service": service,
        "plain": plain,
        "module_info": module_info,
        "notes": notes,
    }
