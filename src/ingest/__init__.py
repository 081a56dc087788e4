"""Tick ingestion pipeline.

This module reads raw tick sources and runs the derivation stages.
It hands immutable derived tables to the store layer.
"""
