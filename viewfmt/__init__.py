"""
viewfmt: a deterministic pretty-printer for PHP view templates.

Templates in the Yii 2 style interleave HTML markup with embedded PHP:
``<?php if (...): ?>`` control flow, ``<?= ... ?>`` echoes, widget
``begin()``/``end()`` pairs, and header blocks of ``use`` imports and
``@var`` docblocks. ``viewfmt`` re-emits such files with fixed four-space
indentation, normalized spacing and a 120-column soft width.

The code is organised into several modules:

* ``parser`` – a tokenizer and tree-builder turning template text into an
  immutable node tree (elements, text, PHP blocks and echoes, doctypes and
  comments).
* ``formatting`` – the engine: expression microformatting, statement
  normalization, long-line splitting, block reindentation, echo formatting
  and the document emitter that ties them together.
* ``config`` – workspace configuration (which files to format).
* ``cli`` – the ``viewfmt`` command line interface.
"""

import re
from pathlib import Path
from importlib import metadata as _metadata


def _local_version() -> str | None:
    root = Path(__file__).resolve().parents[1]
    pyproject = root / "pyproject.toml"
    if not pyproject.exists():
        return None
    try:
        text = pyproject.read_text(encoding="utf-8")
    except OSError:  # pragma: no cover - IO errors should not break imports
        return None
    match = re.search(r"^version\s*=\s*\"([^\"]+)\"", text, flags=re.MULTILINE)
    if match:
        return match.group(1)
    return None


try:  # pragma: no cover - metadata fallback for editable installs
    __version__ = _metadata.version("viewfmt")
except _metadata.PackageNotFoundError:  # pragma: no cover - source tree
    __version__ = _local_version() or "0.1.0"
else:  # pragma: no cover - version override for in-repo runs
    __version__ = _local_version() or __version__

__all__ = ["__version__"]
