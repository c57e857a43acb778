"""
Integration Tests for descentfit
================================

End-to-end fits through ``descentfit.fit`` and the command-line interface.
"""
