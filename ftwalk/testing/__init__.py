"""Testing utilities for ftwalk."""

from .fixtures import (
    FELIDAE,
    FELIDAE_SUBDIRECTORIES,
    FELIDAE_TOP_LEVEL_FILES,
    InMemoryAdapter,
    create_felidae_tree,
    create_tree,
    spec_files,
)

__all__ = [
    'FELIDAE',
    'FELIDAE_SUBDIRECTORIES',
    'FELIDAE_TOP_LEVEL_FILES',
    'InMemoryAdapter',
    'create_felidae_tree',
    'create_tree',
    'spec_files',
]
