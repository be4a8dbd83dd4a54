"""Pytest configuration shared by every suite.

What:
  Establish project import paths and define fixtures that isolate the runtime
  configuration and provide a writable copy of the sample corpus.

Why:
  The tests import the real ``tipbook`` package from the source tree rather
  than an installed wheel, so ``tipbook/src`` is prepended to ``sys.path``.
  tipbook caches its configuration and log threshold globally; without resets
  tests could depend on execution order or on a ``tipbook.yaml`` in the
  developer's home directory.

How:
  The autouse :func:`isolated_runtime` fixture clears ``TIPBOOK_CONFIG_PATH``,
  points ``HOME`` at a temporary directory, resets the configuration cache,
  and restores the default log threshold. :func:`corpus_dir` copies
  ``examples/tips`` into ``tmp_path``.

Interfaces:
  :func:`isolated_runtime`, :func:`corpus_dir`, :func:`write_entry`,
  ``EXAMPLES_DIR``.
"""

import logging
import shutil
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "tipbook" / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

import pytest

from tipbook.config.loader import reset_runtime_config

EXAMPLES_DIR = PROJECT_ROOT / "examples"


@pytest.fixture(autouse=True)
def isolated_runtime(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep configuration discovery and logging state out of the host environment.

    What:
      Removes ``TIPBOOK_CONFIG_PATH``, sets ``HOME`` to an empty directory,
      and clears the runtime configuration cache before and after each test.

    Why:
      Configuration discovery looks at the environment and the home
      directory; tests must see only the files they create.

    Args:
      monkeypatch: Pytest helper used for environment control.
      tmp_path: Per-test temporary directory.
    """

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.delenv("TIPBOOK_CONFIG_PATH", raising=False)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr("tipbook.utils.logging._threshold", "WARNING")
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    reset_runtime_config()
    try:
        yield
    finally:
        reset_runtime_config()
        root.handlers[:] = handlers
        root.setLevel(level)


@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    """Return a writable copy of the sample corpus."""

    target = tmp_path / "tips"
    shutil.copytree(EXAMPLES_DIR / "tips", target)
    return target


@pytest.fixture
def write_entry(corpus_dir: Path):
    """Return a helper writing ``text`` to ``<corpus_dir>/<filename>``."""

    def _write(filename: str, text: str) -> Path:
        path = corpus_dir / filename
        path.write_text(text, encoding="utf-8")
        return path

    return _write
