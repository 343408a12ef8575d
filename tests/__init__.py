"""Cadence Test Suite

Test organization:
- unit/: Unit tests for individual modules
  - core/: config loading, time-window resolution
  - storage/: memory, SQLite and Redis key-value backends
  - learning/: EMA pattern store, energy insights
  - blocks/: block catalog and defaults
  - scheduling/: task-block scorer, suggestion ranker
  - engine/: engine facade and CLI

Running tests:
    # All tests
    pytest

    # Specific area
    pytest tests/unit/scheduling/
"""
