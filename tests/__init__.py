"""Test package initialiser documenting shared fixtures and pytest setup.

What:
  Marks ``tests`` as a package so pytest can import reusable fixtures from nested
  modules.

How:
  The file intentionally exposes no symbols; ``tests/conftest.py`` holds the
  shared fixtures and ``tests/unit`` / ``tests/e2e`` hold the suites.

Invariants & Safety:
  - The file must remain side-effect free so that importing ``tests`` never
    mutates environment state or test fixtures.
"""
