"""Package chapters, stylesheet and cover into an EPUB book."""

from __future__ import annotations

import logging
import mimetypes
from html import escape
from pathlib import Path
from typing import Dict, List, Protocol

try:
    from ebooklib import epub  # type: ignore[import-untyped]
except ImportError as exc:  # pragma: no cover - surfaced at runtime
    raise SystemExit(
        "Missing dependency 'ebooklib'. Install with pip install ebooklib"
    ) from exc

try:
    from bs4 import BeautifulSoup  # type: ignore[import-not-found]
except ImportError as exc:  # pragma: no cover - surfaced at runtime
    raise SystemExit(
        "Missing dependency 'beautifulsoup4'. Install with pip install"
        " beautifulsoup4"
    ) from exc

from .models import BookManuscript, Chapter

LOGGER = logging.getLogger(__name__)

STYLESHEET_NAME = "style/book.css"
IMAGE_DIR = "images"


class BookPackager(Protocol):
    """Anything that can write a :class:`BookManuscript` to ``destination``."""

    def package(self, manuscript: BookManuscript, destination: Path) -> Path:
        ...


class EpubPackager:
    """Write manuscripts as EPUB 3 files with ebooklib.

    Images referenced by absolute filesystem path are copied into the
    package and their ``src`` rewritten to the in-book location.
    """

    def __init__(self, *, embed_images: bool = True) -> None:
        self.embed_images = embed_images

    def package(self, manuscript: BookManuscript, destination: Path) -> Path:
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)

        book = epub.EpubBook()
        book.set_identifier(manuscript.slug)
        book.set_title(manuscript.title)
        book.set_language(manuscript.language)
        if manuscript.author:
            book.add_author(manuscript.author)

        if manuscript.cover_path is not None:
            cover = Path(manuscript.cover_path)
            book.set_cover(f"{IMAGE_DIR}/cover{cover.suffix}", cover.read_bytes())

        stylesheet = epub.EpubItem(
            uid="style_book",
            file_name=STYLESHEET_NAME,
            media_type="text/css",
            content=manuscript.css.encode("utf-8"),
        )
        book.add_item(stylesheet)

        embedded: Dict[Path, str] = {}
        documents: List[epub.EpubHtml] = []
        for index, chapter in enumerate(manuscript.chapters, start=1):
            document = epub.EpubHtml(
                title=chapter.title,
                file_name=f"chapter_{index:02d}.xhtml",
                lang=manuscript.language,
            )
            body = chapter.data
            if self.embed_images:
                body = self._embed_images(book, body, embedded)
            document.content = _chapter_document(chapter, body)
            document.add_item(stylesheet)
            book.add_item(document)
            documents.append(document)

        book.toc = tuple(documents)
        book.add_item(epub.EpubNcx())
        book.add_item(epub.EpubNav())
        book.spine = ["nav", *documents]

        epub.write_epub(str(destination), book, {})
        LOGGER.info(
            "Packaged %d chapters into %s", len(documents), destination
        )
        return destination

    def _embed_images(
        self,
        book: epub.EpubBook,
        html: str,
        embedded: Dict[Path, str],
    ) -> str:
        soup = BeautifulSoup(html, "html.parser")
        changed = False
        for image in soup.find_all("img"):
            source = image.get("src")
            if not isinstance(source, str) or not source.startswith("/"):
                continue
            path = Path(source)
            if not path.is_file():
                LOGGER.warning("Referenced image not found: %s", path)
                continue
            if path not in embedded:
                file_name = f"{IMAGE_DIR}/{len(embedded) + 1:03d}_{path.name}"
                media_type = mimetypes.guess_type(path.name)[0] or "image/png"
                book.add_item(
                    epub.EpubImage(
                        uid=f"image_{len(embedded) + 1:03d}",
                        file_name=file_name,
                        media_type=media_type,
                        content=path.read_bytes(),
                    )
                )
                embedded[path] = file_name
            image["src"] = embedded[path]
            changed = True
        return str(soup) if changed else html


def _chapter_document(chapter: Chapter, body: str) -> str:
    return f"<h1>{escape(chapter.title)}</h1>\n{body}\n"


__all__ = ["BookPackager", "EpubPackager", "STYLESHEET_NAME"]
