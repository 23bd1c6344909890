"""
Storage abstractions for the Nogger runtime.

Includes:
- LogStore: append-only aggregate stream + one detailed stream per event type
"""
