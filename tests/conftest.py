"""Pytest configuration and fixtures for Kairo tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator, Iterable, Optional

import pytest

from kairo.models import MetadataIndexes
from kairo.registry import ExtractionContext, ObjectRegistry


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path_factory, monkeypatch):
    """Point config loading at an empty location so a developer's ~/.kairo never leaks in."""
    home = tmp_path_factory.mktemp("kairo_home")
    monkeypatch.setattr("kairo.config_manager.BASE_DIR", home)
    monkeypatch.setattr("kairo.config_manager.CONFIG_FILE", home / "config.toml")
    monkeypatch.delenv("KAIRO_LOG_LEVEL", raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to the sample SFDX project."""
    return Path(__file__).parent / "fixtures" / "sample_project"


@pytest.fixture
def write_file(temp_dir: Path) -> Callable[[str, str], Path]:
    """Write *content* to *relative* under the temp dir, creating folders."""

    def _write(relative: str, content: str = "") -> Path:
        path = temp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_context() -> Callable[..., ExtractionContext]:
    """Build an ExtractionContext from synthetic name sets."""

    def _make(
        objects: Iterable[str] = (),
        fields: Iterable[str] = (),
        apex_classes: Optional[Iterable[str]] = (),
    ) -> ExtractionContext:
        registry = ObjectRegistry()
        for name in objects:
            registry.register(name)
        indexes = MetadataIndexes(
            object_names=frozenset(objects),
            field_names=frozenset(fields),
            apex_class_names=frozenset(apex_classes or ()),
        )
        context = ExtractionContext.from_indexes(registry, indexes)
        if apex_classes is None:
            context = ExtractionContext(
                resolve=context.resolve,
                is_object_name=context.is_object_name,
                is_apex_class=None,
                is_field_name=context.is_field_name,
            )
        return context

    return _make
