"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import List, Tuple

import pytest
from PIL import Image

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config_loader import CONFIG_ENV_VAR, Settings, load_settings  # noqa: E402
from publishing.models import BookManuscript  # noqa: E402
from publishing.screenshots import Viewport  # noqa: E402


DEMO_POST = """\
---
title: Demo Post
slug: demo
description: A short demo
homeImage: /assets/img/pic.png
---
Intro paragraph.

## Getting started

Some text with ![Pic](/assets/img/pic.png).

### Details

More text.

## Wrapping up

```python
print("done")
```
"""

TEMPLATE_POST = """\
---
title: Template
slug: template
---
## Never exported
"""


def write_png(path: Path, size: Tuple[int, int], color: str = "white") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path, format="PNG")
    return path


class FakeCapturer:
    """Writes a blank PNG at the viewport's device-pixel size."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.calls: List[Tuple[str, Path, Viewport]] = []

    async def capture(
        self, url: str, destination: Path, viewport: Viewport
    ) -> Path:
        self.calls.append((url, destination, viewport))
        if self.fail_on and self.fail_on in url:
            raise RuntimeError(f"navigation failed: {url}")
        return write_png(destination, viewport.pixel_size)


class FakePackager:
    """Records manuscripts and writes a placeholder file."""

    def __init__(self) -> None:
        self.manuscripts: List[BookManuscript] = []

    def package(self, manuscript: BookManuscript, destination: Path) -> Path:
        self.manuscripts.append(manuscript)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(b"book")
        return destination


@pytest.fixture
def site(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A minimal site tree with one post, one template and one asset."""

    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

    posts = tmp_path / "src" / "posts"
    posts.mkdir(parents=True)
    (posts / "demo.md").write_text(DEMO_POST, encoding="utf-8")
    (posts / "_template.md").write_text(TEMPLATE_POST, encoding="utf-8")

    write_png(tmp_path / "src" / "assets" / "img" / "pic.png", (8, 8), "red")
    css = tmp_path / "src" / "assets" / "css" / "book.css"
    css.parent.mkdir(parents=True)
    css.write_text("body { font-family: serif; }\n", encoding="utf-8")

    config = {
        "author": "Test Author",
        "site_url": "https://example.com/",
        "contact_email": "me@example.com",
        "concurrency": 2,
    }
    (tmp_path / "config.json").write_text(json.dumps(config), encoding="utf-8")
    return tmp_path


@pytest.fixture
def settings(site: Path) -> Settings:
    return load_settings(str(site / "config.json"))


@pytest.fixture
def capturer() -> FakeCapturer:
    return FakeCapturer()


@pytest.fixture
def packager() -> FakePackager:
    return FakePackager()
