"""Run store.

This package persists derived pipeline tables as immutable versions
and exposes them through the SDK client.
"""
