"""
Property-Based Tests for descentfit
===================================

Hypothesis tests for invariants of the objective and the bootstrap statistics.
"""
