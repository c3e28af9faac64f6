"""Streaming extraction pipeline.

This module turns a ZIP archive source into plate records: progress
tracking, entry decompression, incremental XML scanning, orchestration.
"""
