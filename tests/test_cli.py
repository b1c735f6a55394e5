from __future__ import annotations

import zipfile

import pytest

import export_books
import process_posts
import render_images
from conftest import FakeCapturer
from pipelines import image_render


def _use_fake_capturer(monkeypatch, capturer):
    real_run = image_render.run

    def fake_run(settings, **kwargs):
        kwargs.setdefault("capturer", capturer)
        return real_run(settings, **kwargs)

    monkeypatch.setattr(image_render, "run", fake_run)
    monkeypatch.setattr(render_images, "run", fake_run)


def test_export_books_cli_writes_epub(site, capsys):
    status = export_books.main(["--config", str(site / "config.json"), "-q"])

    assert status == 0
    assert (site / "src" / "books" / "Demo Post.epub").is_file()
    assert "✅ Books: 1/1 succeeded, 0 failed" in capsys.readouterr().out


def test_export_books_cli_exits_nonzero_on_failure(site, capsys):
    broken = site / "src" / "posts" / "broken.md"
    broken.write_text("---\nslug: broken\n---\n", encoding="utf-8")

    status = export_books.main(["--config", str(site / "config.json")])

    assert status == 1
    out = capsys.readouterr().out
    assert "⚠️ Books: 1/2 succeeded, 1 failed" in out
    assert "broken.md" in out


def test_config_errors_exit_with_message(site):
    with pytest.raises(SystemExit, match="Config error"):
        export_books.main(["--config", str(site / "missing.json")])


def test_concurrency_flag_is_validated(site):
    with pytest.raises(SystemExit, match="concurrency"):
        export_books.main(
            ["--config", str(site / "config.json"), "--concurrency", "0"]
        )


def test_render_images_cli_honors_base_url(site, monkeypatch):
    capturer = FakeCapturer()
    _use_fake_capturer(monkeypatch, capturer)

    status = render_images.main(
        ["--config", str(site / "config.json"), "--base-url", "http://preview:9000/"]
    )

    assert status == 0
    assert capturer.calls[0][0].startswith("http://preview:9000/generate/social?")


def test_process_posts_renders_covers_before_books(site, monkeypatch):
    _use_fake_capturer(monkeypatch, FakeCapturer())

    status = process_posts.main(["--config", str(site / "config.json")])

    assert status == 0
    assert (site / "src" / "assets" / "img" / "books" / "demo-thumb.png").is_file()
    with zipfile.ZipFile(site / "src" / "books" / "Demo Post.epub") as archive:
        assert "EPUB/images/cover.png" in archive.namelist()


def test_process_posts_can_skip_images(site, monkeypatch):
    capturer = FakeCapturer()
    _use_fake_capturer(monkeypatch, capturer)

    status = process_posts.main(
        ["--config", str(site / "config.json"), "--skip-images"]
    )

    assert status == 0
    assert capturer.calls == []
    assert (site / "src" / "books" / "Demo Post.epub").is_file()
