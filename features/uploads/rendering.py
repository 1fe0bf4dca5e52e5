"""HTML form and result fragments served to browser clients."""

from __future__ import annotations

from html import escape
from typing import Sequence

from .schemas import PublishedObject, PublishOutcome

RESULT_SEPARATOR = "<hr>"

UPLOAD_FORM_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>File Uploader</title>
    <style>
        body { font-family: sans-serif; background: #f3f4f6; display: flex; justify-content: center; }
        form { background: #fff; padding: 2rem; margin-top: 3rem; border-radius: 8px; width: 24rem; }
        label { display: block; margin: 1rem 0 0.25rem; font-weight: 600; }
        input, select, button { width: 100%; box-sizing: border-box; padding: 0.5rem; }
        .ttl { display: flex; gap: 0.5rem; }
        button { margin-top: 1.5rem; background: #2563eb; color: #fff; border: 0; border-radius: 6px; }
    </style>
</head>
<body>
    <form action="/upload" method="post" enctype="multipart/form-data">
        <h1>File Uploader</h1>

        <label for="file">Files</label>
        <input type="file" name="file" id="file" multiple required>

        <label for="identifier">Identifier (single file only)</label>
        <input type="text" name="identifier" id="identifier" placeholder="Published name without extension">

        <label>Expiration (TTL)</label>
        <div class="ttl">
            <input type="number" name="ttl_value" min="1" value="1">
            <select name="ttl_unit">
                <option value="minutes">Minutes</option>
                <option value="hours" selected>Hours</option>
            </select>
        </div>

        <label for="password">Password</label>
        <input type="password" name="password" id="password" required>

        <button type="submit">Upload</button>
    </form>
</body>
</html>
"""


def _describe_expiry(ttl_seconds: int) -> str:
    if ttl_seconds <= 0:
        return "never (kept until removed manually)"
    return f"{ttl_seconds} seconds"


def render_outcome(outcome: PublishOutcome) -> str:
    if isinstance(outcome, PublishedObject):
        url = escape(outcome.retrieval_url, quote=True)
        return (
            f"<p>File: {escape(outcome.key)} uploaded successfully! "
            f"<br>Download: <a href='{url}'>{url}</a> "
            f"<br>Expires in: {_describe_expiry(outcome.ttl_seconds)}</p>"
        )
    return f"<p>Upload failed for {escape(outcome.filename)}: {escape(outcome.error)}</p>"


def render_outcomes(outcomes: Sequence[PublishOutcome]) -> str:
    """One paragraph per file, separated by horizontal rules."""

    return RESULT_SEPARATOR.join(render_outcome(outcome) for outcome in outcomes)


def render_message(message: str) -> str:
    return f"<p>{escape(message)}</p>"


__all__ = [
    "RESULT_SEPARATOR",
    "UPLOAD_FORM_HTML",
    "render_message",
    "render_outcome",
    "render_outcomes",
]
