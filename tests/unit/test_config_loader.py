"""
Module: tests/unit/test_config_loader.py

What:
    Validate the configuration and corpus loader helpers by exercising
    happy-path parsing, discovery precedence, caching, and error signalling.

Why:
    Every CLI command starts here. A malformed ``tipbook.yaml`` or entry file
    must fail with a typed error naming the file, and a healthy corpus must
    load in a stable order.

How:
    Write YAML/JSON payloads and entry files under ``tmp_path`` and assert on
    the resulting models and raised exceptions.

Invariants & Safety Rules:
    - Runtime cache is cleared around each test (see ``tests/conftest.py``).
    - Relative ``content.directory`` values resolve against the config file.
"""

import json

import pytest

from tipbook.config.loader import (
    CorpusLoadError,
    RuntimeConfigError,
    get_runtime_config,
    load_corpus,
    load_entry_file,
    load_runtime_config,
    reset_runtime_config,
    resolve_content_dir,
)
from tipbook.config.schema import RuntimeConfig
from tipbook.errors import ParseError


def test_load_runtime_config_from_env(tmp_path, monkeypatch):
    """
    What:
        Load ``tipbook.yaml`` through ``TIPBOOK_CONFIG_PATH``.

    Why:
        CI jobs point at a shared configuration through the environment.

    How:
        Write a YAML payload, set the variable, and check values, including
        the relative directory resolved against the config file location.
    """
    config_path = tmp_path / "conf" / "tipbook.yaml"
    config_path.parent.mkdir()
    config_path.write_text(
        """
version: 1
content:
  directory: ../tips
  pattern: "**/*.tip"
checks:
  fail_on_warnings: true
render:
  width: 100
logging:
  level: debug
"""
    )
    monkeypatch.setenv("TIPBOOK_CONFIG_PATH", str(config_path))
    runtime = load_runtime_config()
    assert runtime.content.directory == str((tmp_path / "tips").resolve())
    assert runtime.content.pattern == "**/*.tip"
    assert runtime.checks.fail_on_warnings is True
    assert runtime.render.width == 100
    assert runtime.logging.level == "DEBUG"


def test_load_runtime_config_from_json(tmp_path):
    config_path = tmp_path / "tipbook.json"
    config_path.write_text(json.dumps({"version": 1, "content": {"directory": "/srv/tips"}}))
    runtime = load_runtime_config(config_path)
    assert runtime.content.directory == "/srv/tips"
    assert runtime.content.pattern == "*.tip"


def test_empty_config_uses_defaults(tmp_path):
    config_path = tmp_path / "tipbook.yaml"
    config_path.write_text("")
    assert load_runtime_config(config_path) == RuntimeConfig()


def test_explicit_path_beats_environment(tmp_path, monkeypatch):
    env_path = tmp_path / "env.yaml"
    env_path.write_text("render:\n  width: 30\n")
    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("render:\n  width: 60\n")
    monkeypatch.setenv("TIPBOOK_CONFIG_PATH", str(env_path))
    assert load_runtime_config(explicit).render.width == 60


def test_working_directory_default(tmp_path, monkeypatch):
    (tmp_path / "tipbook.yaml").write_text("render:\n  width: 42\n")
    monkeypatch.chdir(tmp_path)
    assert load_runtime_config().render.width == 42


@pytest.mark.parametrize(
    "payload",
    [
        pytest.param("unknown: 1\n", id="unknown-key"),
        pytest.param("render:\n  width: 5\n", id="width-too-small"),
        pytest.param("version: 2\n", id="bad-version"),
        pytest.param("- a\n- b\n", id="not-a-mapping"),
        pytest.param("content: [unclosed\n", id="invalid-yaml"),
    ],
)
def test_invalid_config_raises(tmp_path, payload):
    config_path = tmp_path / "tipbook.yaml"
    config_path.write_text(payload)
    with pytest.raises(RuntimeConfigError) as excinfo:
        load_runtime_config(config_path)
    assert str(config_path) in str(excinfo.value)


def test_missing_explicit_config_raises(tmp_path, monkeypatch):
    """An explicit path never falls back to other locations."""
    (tmp_path / "tipbook.yaml").write_text("render:\n  width: 42\n")
    monkeypatch.chdir(tmp_path)
    with pytest.raises(RuntimeConfigError, match="Configuration file missing"):
        load_runtime_config(tmp_path / "nope.yaml", optional=True)


def test_missing_config_raises(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(RuntimeConfigError, match="Unable to locate tipbook.yaml"):
        load_runtime_config()


def test_missing_config_is_optional(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert get_runtime_config() == RuntimeConfig()


def test_cache_and_reset(tmp_path):
    config_path = tmp_path / "tipbook.yaml"
    config_path.write_text("render:\n  width: 50\n")
    first = load_runtime_config(config_path)
    config_path.write_text("render:\n  width: 70\n")
    assert load_runtime_config(config_path) is first
    assert load_runtime_config(config_path, reload=True).render.width == 70
    reset_runtime_config()
    assert load_runtime_config(config_path).render.width == 70


def test_resolve_content_dir(tmp_path):
    configured = RuntimeConfig.model_validate({"content": {"directory": str(tmp_path)}})
    assert resolve_content_dir("explicit", configured).name == "explicit"
    assert resolve_content_dir(None, configured) == tmp_path
    assert str(resolve_content_dir(None, RuntimeConfig())) == "."


def test_load_entry_file(corpus_dir):
    loaded = load_entry_file(corpus_dir / "custom-markers.tip")
    assert loaded.entry.name == "Registering custom markers"
    assert loaded.raw.startswith("name: Registering custom markers\n")
    assert loaded.checksum.startswith("sha256:")
    assert loaded.path == corpus_dir / "custom-markers.tip"


def test_load_entry_file_wraps_parse_error(write_entry):
    path = write_entry("broken.tip", "name: Broken\n")
    with pytest.raises(CorpusLoadError) as excinfo:
        load_entry_file(path)
    assert excinfo.value.path == path
    assert isinstance(excinfo.value.parse_error, ParseError)
    assert isinstance(excinfo.value.__cause__, ParseError)
    assert str(path) in str(excinfo.value)
    assert "missing required field: content" in str(excinfo.value)


def test_load_entry_file_missing(tmp_path):
    with pytest.raises(CorpusLoadError, match="Entry file missing"):
        load_entry_file(tmp_path / "absent.tip")


def test_load_entry_file_bad_encoding(write_entry, corpus_dir):
    path = corpus_dir / "latin.tip"
    path.write_bytes("name: Caf\xe9\n---\ncontent: x\n".encode("latin-1"))
    with pytest.raises(CorpusLoadError, match="Unable to decode"):
        load_entry_file(path)


def test_load_corpus_sorted(corpus_dir):
    result = load_corpus(corpus_dir)
    assert [loaded.path.name for loaded in result] == [
        "addoption-hook.tip",
        "custom-markers.tip",
        "fixture-factories.tip",
        "parametrize-ids.tip",
    ]
    assert result.ok
    assert len(result) == 4


def test_load_corpus_ignores_other_files(corpus_dir):
    (corpus_dir / "notes.txt").write_text("not an entry")
    assert len(load_corpus(corpus_dir)) == 4


def test_load_corpus_strict_raises(write_entry, corpus_dir):
    write_entry("broken.tip", "oops\n")
    with pytest.raises(CorpusLoadError):
        load_corpus(corpus_dir)


def test_load_corpus_collects_failures(write_entry, corpus_dir):
    write_entry("broken.tip", "oops\n")
    result = load_corpus(corpus_dir, strict=False)
    assert len(result.entries) == 4
    assert [failure.path.name for failure in result.failures] == ["broken.tip"]
    assert not result.ok


def test_load_corpus_missing_directory(tmp_path):
    with pytest.raises(CorpusLoadError, match="Corpus directory not found"):
        load_corpus(tmp_path / "nowhere")


def test_discovery_ignores_cached_explicit_config(tmp_path, monkeypatch):
    """A config loaded from an explicit path does not answer later discovery."""

    explicit = tmp_path / "elsewhere.yaml"
    explicit.write_text("render:\n  width: 60\n")
    workdir = tmp_path / "work"
    workdir.mkdir()
    (workdir / "tipbook.yaml").write_text("render:\n  width: 42\n")
    monkeypatch.chdir(workdir)

    assert load_runtime_config(explicit).render.width == 60
    assert get_runtime_config().render.width == 42
    assert load_runtime_config(explicit).render.width == 60


def test_discovery_result_is_cached(tmp_path, monkeypatch):
    config_path = tmp_path / "tipbook.yaml"
    config_path.write_text("render:\n  width: 50\n")
    monkeypatch.chdir(tmp_path)
    first = load_runtime_config()
    config_path.write_text("render:\n  width: 70\n")
    assert get_runtime_config() is first
