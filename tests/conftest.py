"""
Pytest bootstrap for src/ layout.

Puts ./src and the repo root on sys.path so `probability_lab` and
`simulations` import without an editable install.
"""
from __future__ import annotations

import sys
from pathlib import Path

repo_root = Path(__file__).resolve().parents[1]
for path in (repo_root / "src", repo_root):
    path_str = str(path)
    if path.is_dir() and path_str not in sys.path:
        sys.path.insert(0, path_str)
