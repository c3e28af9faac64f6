"""Record storage layer.

This module holds the deduplicated plate index built during a run.
"""
