"""Schema test fixtures."""

from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture
def design_payload() -> dict[str, Any]:
    """A well-formed design response body.

    Returns:
        Two source files, one compiled file and three chat messages, the
        last of which uses block content.
    """
    return {
        "id": "design_8f2c",
        "sourceFiles": [
            {
                "id": "src_1",
                "name": "App.tsx",
                "code": "export default function App() { return <Login />; }",
                "type": "javascript",
            },
            {
                "id": "src_2",
                "name": "index.css",
                "code": "@tailwind base;\n@tailwind components;",
                "type": "css",
            },
        ],
        "compiledFiles": [
            {
                "id": "cmp_1",
                "fileName": "bundle.js",
                "hostedUrl": "https://cdn.magicpatterns.com/d/design_8f2c/bundle.js",
                "type": "javascript",
            }
        ],
        "editorUrl": "https://www.magicpatterns.com/c/design_8f2c",
        "previewUrl": "https://design_8f2c.magicpatterns.app",
        "chatMessages": [
            {"role": "user", "content": "A login form with email and password"},
            {"role": "assistant", "content": "Here is your login form."},
            {
                "role": "assistant",
                "content": [
                    {"type": "text", "text": "I added a remember-me checkbox."},
                    {"type": "text", "text": "Colors follow the preset."},
                ],
            },
        ],
    }
