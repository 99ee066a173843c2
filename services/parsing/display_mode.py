"""Display/inline decision for ``$...$`` fragments."""
from __future__ import annotations

import re

BLOCK_ENVIRONMENTS = (
    "pmatrix",
    "bmatrix",
    "vmatrix",
    "Vmatrix",
    "matrix",
    "cases",
    "align",
    "equation",
    "gather",
)

BLOCK_ENV_RE = re.compile(r"\\begin\{(?:%s)" % "|".join(BLOCK_ENVIRONMENTS))


def should_be_display_mode(latex: str) -> bool:
    """True when the source opens a block-level environment (no nesting check)."""
    return bool(BLOCK_ENV_RE.search(latex))
