"""Pytest configuration for tests."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import pytest

# Add the project root to the Python path so "from services..." works
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from services.render.adapter import RendererAdapter  # noqa: E402
from services.render.engine import RenderOptions  # noqa: E402


class FakeRenderer:
    """Predictable renderer; raises for any source listed in ``fail_on``."""

    def __init__(self, fail_on: tuple[str, ...] = ()) -> None:
        self.fail_on = fail_on
        self.calls: list[tuple[str, RenderOptions]] = []

    def render(self, source: str, options: RenderOptions) -> str:
        self.calls.append((source, options))
        if source in self.fail_on:
            raise RuntimeError(f"cannot render {source}")
        mode = "block" if options.display_mode else "inline"
        return f"<{options.output_format} mode={mode}>{source}</{options.output_format}>"


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def fake_adapter(fake_renderer: FakeRenderer) -> RendererAdapter:
    return RendererAdapter(fake_renderer)


class FakeClipboardBackend:
    """In-memory clipboard; each operation can be made to fail."""

    def __init__(
        self,
        mime_fails: bool = False,
        selection_fails: bool = False,
        html: Optional[str] = None,
        text: str = "",
        read_fails: bool = False,
        hand_off_fails: bool = False,
    ) -> None:
        self.mime_fails = mime_fails
        self.selection_fails = selection_fails
        self.html = html
        self.text = text
        self.read_fails = read_fails
        self.hand_off_fails = hand_off_fails
        self.written: list[tuple[str, ...]] = []
        self.hand_offs: list[int] = []

    def write_mime(self, html: str, text: str) -> None:
        if self.mime_fails:
            raise RuntimeError("no rich clipboard")
        self.written.append(("mime", html, text))

    def copy_via_selection(self, html: str) -> None:
        if self.selection_fails:
            raise RuntimeError("copy command failed")
        self.written.append(("selection", html))

    def read_text(self) -> str:
        if self.read_fails:
            raise RuntimeError("denied")
        return self.text

    def read_html(self) -> Optional[str]:
        if self.read_fails:
            raise RuntimeError("denied")
        return self.html

    def hand_off(self, msec: int) -> None:
        if self.hand_off_fails:
            raise RuntimeError("no event loop")
        self.hand_offs.append(msec)
