"""Test fixtures for ftwalk consumers.

These helpers build directory trees on disk and in memory so walks can
be tested without depending on the layout of a real filesystem.
"""

import asyncio
import os
import stat as stat_module
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..aio.core.adapter import AsyncDirectoryAdapter


# Nested mapping: a dict is a directory, a str is file content.
TreeSpec = Dict[str, Union[str, 'TreeSpec']]


FELIDAE: TreeSpec = {
    'Felid.md': '# Felidae\n',
    'Felinae.md': '# Felinae\n',
    'Pantherinae.md': '# Pantherinae\n',
    'Felis': {
        'Felis_catus.md': '# Domestic cat\n',
        'Felis_silvestris.md': '# Wildcat\n',
    },
    'Leopardus': {
        'Leopardus_geoffroyi.md': "# Geoffroy's cat\n",
        'Leopardus_jacobita.md': '# Andean mountain cat\n',
        'Leopardus_pardalis.md': '# Ocelot\n',
    },
    'Lynx': {
        'Lynx_canadensis.md': '# Canada lynx\n',
        'Lynx_lynx.md': '# Eurasian lynx\n',
    },
    'Panthera': {
        'Panthera_leo.md': '# Lion\n',
        'Panthera_onca.md': '# Jaguar\n',
        'Panthera_pardus.md': '# Leopard\n',
        'Panthera_tigris.md': '# Tiger\n',
    },
    'Puma': {
        'Puma_concolor.md': '# Cougar\n',
        'Puma_yagouaroundi.md': '# Jaguarundi\n',
    },
}

FELIDAE_TOP_LEVEL_FILES = ['Felid.md', 'Felinae.md', 'Pantherinae.md']
FELIDAE_SUBDIRECTORIES = ['Felis', 'Leopardus', 'Lynx', 'Panthera', 'Puma']


def create_tree(root: Path, spec: TreeSpec) -> Path:
    """Materialize a tree spec under root.

    Args:
        root: Directory to create (parents are created as needed)
        spec: Nested mapping of names to content or subtrees

    Returns:
        The root path
    """
    root = Path(root)
    root.mkdir(parents=True, exist_ok=True)
    for name, content in spec.items():
        target = root / name
        if isinstance(content, dict):
            create_tree(target, content)
        else:
            target.write_text(content)
    return root


def create_felidae_tree(parent: Path) -> Path:
    """Create the Felidae sample tree (16 markdown files) under parent.

    Returns:
        Path of the Felidae directory
    """
    return create_tree(Path(parent) / 'Felidae', FELIDAE)


def spec_files(spec: TreeSpec, prefix: str = '') -> List[str]:
    """List every file path in a tree spec, sorted, joined with os.sep."""
    files = []
    for name, content in spec.items():
        path = os.path.join(prefix, name) if prefix else name
        if isinstance(content, dict):
            files.extend(spec_files(content, path))
        else:
            files.append(path)
    return sorted(files)


def _fake_stat(mode: int) -> os.stat_result:
    return os.stat_result((mode, 0, 0, 1, 0, 0, 0, 0, 0, 0))


class InMemoryAdapter(AsyncDirectoryAdapter):
    """Adapter over an in-memory tree spec.

    Paths are '/'-joined strings; the root spec is mounted at ``root``.
    Special entries can be injected with ``modes`` (path -> st_mode) and
    failures with ``read_failures`` / ``stat_failures`` (path ->
    exception). Every operation yields to the event loop for ``delay``
    seconds so calls genuinely overlap, and the adapter logs the order
    of reads and stats.
    """

    def __init__(
        self,
        spec: TreeSpec,
        root: str = 'root',
        modes: Optional[Dict[str, int]] = None,
        read_failures: Optional[Dict[str, BaseException]] = None,
        stat_failures: Optional[Dict[str, BaseException]] = None,
        delay: float = 0,
        max_concurrent: Optional[int] = 100,
    ):
        super().__init__(max_concurrent)
        self.spec = spec
        self.root = root
        self.modes = modes or {}
        self.read_failures = read_failures or {}
        self.stat_failures = stat_failures or {}
        self.delay = delay
        self.read_log: List[str] = []
        self.inspect_log: List[str] = []

    def join(self, directory: str, name: str) -> str:
        return f"{directory}/{name}"

    def key(self, path: str) -> str:
        return path.rstrip('/')

    def _lookup(self, path: str):
        parts = self.key(path).split('/')
        if parts[0] != self.root:
            raise FileNotFoundError(2, 'No such file or directory', path)
        node: Union[str, TreeSpec] = self.spec
        for part in parts[1:]:
            if not isinstance(node, dict) or part not in node:
                raise FileNotFoundError(2, 'No such file or directory', path)
            node = node[part]
        return node

    async def list_directory(self, path: str) -> List[str]:
        async with self.slot():
            await asyncio.sleep(self.delay)
            self.read_log.append(path)
            if path in self.read_failures:
                raise self.read_failures[path]
            node = self._lookup(path)
            if not isinstance(node, dict):
                raise NotADirectoryError(20, 'Not a directory', path)
            return list(node)

    async def inspect(self, path: str) -> os.stat_result:
        async with self.slot():
            await asyncio.sleep(self.delay)
            self.inspect_log.append(path)
            if path in self.stat_failures:
                raise self.stat_failures[path]
            if path in self.modes:
                return _fake_stat(self.modes[path])
            node = self._lookup(path)
            if isinstance(node, dict):
                return _fake_stat(stat_module.S_IFDIR | 0o755)
            return _fake_stat(stat_module.S_IFREG | 0o644)
