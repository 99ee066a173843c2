"""Standalone HTML export."""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

from core.config import settings
from core.errors import ExportError
from core.logger import logger
from utils.html_utils import escape_attribute

DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Clean Math Text</title>
<link rel="stylesheet" href="{stylesheet}">
<style>
body {{ font-family: Cambria, 'Times New Roman', serif; font-size: 12pt; line-height: 1.8; max-width: 800px; margin: 2rem auto; padding: 0 1rem; color: #222; }}
.bullet {{ font-weight: bold; }}
.math-display {{ margin: 0.6em 0; text-align: center; }}
.math-error {{ border-bottom: 1px dotted; }}
</style>
</head>
<body>
{body}
</body>
</html>"""


def export_filename(now: Optional[datetime] = None, suffix: str = ".html") -> str:
    """Timestamped name so repeated exports never collide."""
    stamp = (now or datetime.now()).strftime("%Y%m%dT%H%M%S")
    return f"math_text_{stamp}{suffix}"


def build_document(body: str, stylesheet_url: Optional[str] = None) -> str:
    """Wrap preview markup (or plain text) into a standalone HTML page."""
    if not body or not body.strip():
        raise ExportError("Nothing to export; process some content first")
    return DOCUMENT_TEMPLATE.format(
        stylesheet=escape_attribute(stylesheet_url or settings.export_stylesheet_url),
        body=body,
    )


class HTMLWriter:
    """Persist exported documents to disk."""

    def __init__(self, output_dir: Optional[Path] = None) -> None:
        self.output_dir = output_dir or settings.export_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write_html(self, body: str, filename: Optional[str] = None) -> Path:
        """Write ``body`` as a standalone page and return its path."""
        document = build_document(body)
        path = self.output_dir / (filename or export_filename())
        logger.info("Writing HTML export to %s", path)
        path.write_text(document, encoding="utf-8")
        return path
