"""Route tree scanner -- walks route directories and yields candidates.

The walk is read-only and deterministic: within a directory, files come
first in lexicographic order, then sub-directories in lexicographic
order. Names starting with ``_`` or ``.`` are skipped (``__init__.py``,
``__pycache__``, editor files).
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from wren.discovery.conventions import directory_segment, join_path
from wren.discovery.types import GLOBAL_PREFIX, RouteCandidate

logger = logging.getLogger("wren.discovery")

DEFAULT_EXTENSION = ".py"
DEFAULT_MOUNT_PREFIX = "/api"


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(("_", "."))


def scan_tree(
    root: str | Path,
    base_path: str = "",
    module_prefix: str = GLOBAL_PREFIX,
    *,
    extension: str = DEFAULT_EXTENSION,
) -> Iterator[RouteCandidate]:
    """Yield every route file under *root*.

    A missing root is logged and yields nothing.
    """
    directory = Path(root)
    if not directory.is_dir():
        logger.warning("Routes directory not found: %s", directory)
        return
    yield from _walk(directory.resolve(), base_path, module_prefix, extension)


def _walk(
    directory: Path,
    base_path: str,
    module_prefix: str,
    extension: str,
) -> Iterator[RouteCandidate]:
    entries = sorted(directory.iterdir(), key=lambda p: p.name)

    for item in entries:
        if not item.is_file() or _is_hidden(item):
            continue
        if not item.name.endswith(extension):
            continue
        yield RouteCandidate(
            full_path=item,
            base_path=base_path,
            file_name=item.name,
            module_prefix=module_prefix,
        )

    for item in entries:
        if not item.is_dir() or _is_hidden(item):
            continue
        yield from _walk(
            item,
            join_path(base_path, directory_segment(item.name)),
            module_prefix,
            extension,
        )


def list_modules(modules_root: str | Path) -> list[str]:
    """Names of the module directories under *modules_root*, sorted.

    A missing root is an empty list.
    """
    root = Path(modules_root)
    if not root.is_dir():
        return []
    return sorted(p.name for p in root.iterdir() if p.is_dir() and not _is_hidden(p))


def scan_module_trees(
    modules_root: str | Path,
    mount_prefix: str = DEFAULT_MOUNT_PREFIX,
    *,
    extension: str = DEFAULT_EXTENSION,
) -> Iterator[RouteCandidate]:
    """Yield candidates from ``<modules_root>/<module>/routes`` for every module.

    Each module's tree is mounted at ``<mount_prefix>/<module>``. Modules
    without a ``routes`` directory are logged and skipped.
    """
    root = Path(modules_root)
    if not root.is_dir():
        logger.warning("Modules directory not found: %s", root)
        return

    logger.info("Scanning modules directory: %s", root)
    loaded = 0
    for name in list_modules(root):
        routes_path = root / name / "routes"
        if not routes_path.is_dir():
            logger.warning("Module '%s' has no routes directory, skipping", name)
            continue
        logger.info("Loading routes for module: %s", name)
        yield from scan_tree(
            routes_path,
            f"{mount_prefix.rstrip('/')}/{name}",
            name,
            extension=extension,
        )
        loaded += 1

    if loaded:
        logger.info("Loaded routes from %d module(s)", loaded)
    else:
        logger.warning("No modules with routes found")


def discover(
    routes_dir: str | Path | None,
    modules_dir: str | Path | None = None,
    *,
    mount_prefix: str = DEFAULT_MOUNT_PREFIX,
    extension: str = DEFAULT_EXTENSION,
) -> list[RouteCandidate]:
    """Scan the global tree, then every module tree.

    Either directory may be ``None`` to skip it.
    """
    candidates: list[RouteCandidate] = []
    if routes_dir is not None:
        logger.info("Scanning global routes directory: %s", routes_dir)
        candidates.extend(scan_tree(routes_dir, extension=extension))
    if modules_dir is not None:
        candidates.extend(scan_module_trees(modules_dir, mount_prefix, extension=extension))
    return candidates
