"""Regression tests for snapshot testing.

Uses syrupy for snapshot assertions to detect unexpected changes
in evaluation results of the bundled sample decisions.
"""
