"""Application entry point for Math Tag Cleaner (FastAPI service and clipboard CLI)."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel

from core.config import settings
from core.errors import MathCleanerError
from core.logger import init_logging, logger
from services.exporters.html_writer import HTMLWriter, build_document, export_filename
from services.pipeline import contains_math, process_text
from services.segments import ProcessingResult, segment_to_dict
from services.strategies import StrategyResult, get_strategy
from utils.file_utils import ensure_directories
from utils.html_utils import escape_html

if TYPE_CHECKING:
    from ui.clipboard import ClipboardService

INDEX_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Math Tag Cleaner</title>
    <style>
        body { font-family: Arial, sans-serif; max-width: 1000px; margin: 0 auto; padding: 20px; background: #1e1e1e; color: white; }
        h1 { color: #0078d4; }
        textarea { width: 100%; min-height: 200px; background: #2b2b2b; color: white; border-radius: 4px; padding: 10px; }
        button { background: #0078d4; color: white; padding: 10px 20px; border: none; border-radius: 4px; cursor: pointer; font-size: 16px; margin: 10px 5px 10px 0; }
        button:hover { background: #106ebe; }
        #preview { background: white; color: #222; padding: 15px; border-radius: 4px; min-height: 80px; font-family: Cambria, serif; }
        #notification { margin: 10px 0; min-height: 1.2em; }
        .math-error { color: #cc0000; }
        .bullet { font-weight: bold; }
    </style>
</head>
<body>
    <h1>Math Tag Cleaner</h1>
    <p>Paste text with MathML, $...$ or $$...$$ formulas</p>
    <textarea id="input"></textarea>
    <div>
        <button onclick="processInput()">Clean Tags</button>
        <button onclick="copyResult()">Copy for Word</button>
        <button onclick="downloadResult()">Download HTML</button>
    </div>
    <div id="notification"></div>
    <div id="preview"></div>

    <script>
        let lastResult = null;

        function notify(message) {
            document.getElementById('notification').textContent = message;
        }

        async function processInput() {
            const text = document.getElementById('input').value;
            const response = await fetch('/process', {
                method: 'POST',
                headers: {'Content-Type': 'application/json'},
                body: JSON.stringify({text: text})
            });
            const data = await response.json();
            if (data.status === 'success') {
                lastResult = data;
                document.getElementById('preview').innerHTML = data.preview_html;
                notify('Text cleaned and rendered');
            } else {
                notify('Error: ' + data.message);
            }
        }

        async function copyResult() {
            if (!lastResult) { notify('Process some content first'); return; }
            try {
                const item = new ClipboardItem({
                    'text/html': new Blob([lastResult.word_html], {type: 'text/html'}),
                    'text/plain': new Blob([lastResult.plain_text], {type: 'text/plain'})
                });
                await navigator.clipboard.write([item]);
                notify('Copied to clipboard (ready for Word)');
            } catch (err) {
                const holder = document.createElement('div');
                holder.innerHTML = lastResult.word_html;
                holder.style.cssText = 'position:fixed;left:-9999px;top:0;opacity:0;';
                document.body.appendChild(holder);
                const range = document.createRange();
                range.selectNodeContents(holder);
                const sel = window.getSelection();
                sel.removeAllRanges();
                sel.addRange(range);
                try {
                    document.execCommand('copy');
                    notify('Copied (fallback)');
                } catch (e) {
                    notify('Could not copy. Select the preview and copy it manually.');
                }
                sel.removeAllRanges();
                document.body.removeChild(holder);
            }
        }

        async function downloadResult() {
            if (!lastResult) { notify('Nothing to download, process first'); return; }
            const response = await fetch('/download', {
                method: 'POST',
                headers: {'Content-Type': 'application/json'},
                body: JSON.stringify({text: document.getElementById('input').value})
            });
            if (!response.ok) { notify('Download failed'); return; }
            const disposition = response.headers.get('Content-Disposition') || '';
            const match = disposition.match(/filename="([^"]+)"/);
            const url = URL.createObjectURL(await response.blob());
            const link = document.createElement('a');
            link.href = url;
            link.download = match ? match[1] : 'math_text.html';
            link.click();
            URL.revokeObjectURL(url);
            notify('HTML file downloaded');
        }
    </script>
</body>
</html>
"""


class TextRequest(BaseModel):
    text: str
    strategy: Optional[str] = None


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)


def _export_body(result: StrategyResult) -> str:
    """Preview markup, or the plain text escaped for an HTML page."""
    if isinstance(result, ProcessingResult):
        return result.preview_markup
    return escape_html(result.plain_text).replace("\n", "<br>\n")


def create_app() -> FastAPI:
    """Create FastAPI app with processing, plain-text and download routes."""
    app = FastAPI(title="Math Tag Cleaner", version="0.1.0")

    @app.on_event("startup")
    async def startup_event() -> None:
        init_logging()
        ensure_directories()
        logger.info("FastAPI service started")

    @app.get("/", response_class=HTMLResponse)
    async def root() -> str:
        """Serve simple HTML frontend."""
        return INDEX_HTML

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/process")
    async def process(request: TextRequest) -> JSONResponse:
        """Render text for preview and for pasting into a word processor."""
        try:
            strategy = get_strategy(request.strategy)
            result = process_text(request.text, strategy)
        except (MathCleanerError, ValueError) as exc:
            return _error(str(exc), 400)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Processing failed: %s", exc)
            return _error(str(exc), 500)

        if not isinstance(result, ProcessingResult):
            return JSONResponse({"status": "success", "plain_text": result.plain_text})
        return JSONResponse({
            "status": "success",
            "preview_html": result.preview_markup,
            "word_html": result.clipboard_markup,
            "plain_text": result.plain_text,
            "segments": [segment_to_dict(seg) for seg in result.segments],
            "math_detected": contains_math(request.text),
        })

    @app.post("/plain")
    async def plain(request: TextRequest) -> JSONResponse:
        """Legacy plain-text cleaning."""
        try:
            result = process_text(request.text, get_strategy("plain"))
        except MathCleanerError as exc:
            return _error(str(exc), 400)
        return JSONResponse({"status": "success", "plain_text": result.plain_text})

    @app.post("/download")
    async def download(request: TextRequest) -> Response:
        """Standalone HTML page of the preview as an attachment."""
        try:
            result = process_text(request.text, get_strategy(request.strategy))
            body = _export_body(result)
            document = build_document(body)
        except (MathCleanerError, ValueError) as exc:
            return _error(str(exc), 400)

        filename = export_filename()
        return Response(
            content=document,
            media_type="text/html; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return app


def _run_clipboard(clipboard: Optional[ClipboardService] = None) -> int:
    """Clean whatever is on the clipboard and put the rich result back."""
    from ui.clipboard import ClipboardService

    clipboard = clipboard or ClipboardService()
    try:
        text = clipboard.paste_html()
        result = process_text(text, get_strategy("rich"))
        message = clipboard.copy_rich(result.clipboard_markup, result.plain_text)
    except MathCleanerError as exc:
        logger.error("%s", exc)
        return 1
    logger.info("%s", message)
    clipboard.hand_off(settings.clipboard_handoff_ms)
    return 0


def _run_file(path: Path) -> int:
    """Clean a text file and export the preview as HTML."""
    try:
        result = process_text(path.read_text(encoding="utf-8"), get_strategy())
        body = _export_body(result)
        output = HTMLWriter().write_html(body)
    except (OSError, MathCleanerError) as exc:
        logger.error("%s", exc)
        return 1
    print(output)
    return 0


def main() -> None:
    """Entry point for CLI; `api` (default), `clip`, or `file <path>`."""
    init_logging()
    ensure_directories()

    mode: Optional[str] = sys.argv[1] if len(sys.argv) > 1 else "api"

    if mode == "clip":
        sys.exit(_run_clipboard())
    if mode == "file":
        if len(sys.argv) < 3:
            logger.error("Usage: math-tag-cleaner file <path>")
            sys.exit(2)
        sys.exit(_run_file(Path(sys.argv[2])))

    logger.info("Starting FastAPI server at %s:%s", settings.host, settings.port)
    uvicorn.run(create_app(), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
