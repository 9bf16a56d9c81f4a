"""
Pytest configuration.

The project uses a ``src/`` layout (package code lives in ``src/content_type``).
Normally tests run after installing the package (e.g. ``pip install -e .``).

When the package cannot be imported normally (for instance an editable install
whose ``.pth`` file is skipped), ``src/`` is added to ``sys.path`` so the
tests still find the source tree.
"""

from __future__ import annotations

import sys
from pathlib import Path


def _ensure_src_on_path() -> None:
    try:
        import content_type  # noqa: F401
        return
    except ModuleNotFoundError:
        pass

    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    sys.path.insert(0, str(src_dir))


_ensure_src_on_path()
