"""
descentfit Test Suite
=====================

Test Categories:
- Unit Tests: models, objective, line search, minimizers, bootstrap, config, CLI
- Integration Tests: end-to-end fits through the public API and the CLI
- Property Tests: invariants of the objective and the statistics helpers

Requirements:
- pytest >= 6.2.0
- hypothesis >= 6.0.0
"""
