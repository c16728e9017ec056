"""Dataset cleaning pipeline.

This module reads table snapshots and runs the normalization rules
and referential pruning over them before results reach the store.
"""
