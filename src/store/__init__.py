"""Cleaning run storage layer.

This module persists cleaned tables, pruning backups, and reports.
It powers the SDK client used by the CLI.
"""
