"""Build artifacts from model-supplied HTML, CSS and JavaScript.

Each artifact carries two renditions:

* ``previewHtml`` - allow-list sanitised markup, safe to drop into the chat
  transcript.
* ``fullHtml`` - a standalone document with the raw CSS and a module script.
  It is executable by design and must only ever be rendered inside a
  sandboxed iframe.
"""

import uuid
from typing import Optional

import nh3

from artifact_chat.schemas.chat import Artifact

# Conservative base set of structural and inline formatting tags
BASE_ALLOWED_TAGS = {
    "address", "article", "aside", "footer", "header",
    "h1", "h2", "h3", "h4", "h5", "h6", "hgroup", "main", "nav", "section",
    "blockquote", "dd", "div", "dl", "dt", "figcaption", "figure", "hr",
    "li", "ol", "p", "pre", "ul",
    "a", "abbr", "b", "bdi", "bdo", "br", "cite", "code", "data", "dfn",
    "em", "i", "kbd", "mark", "q", "rb", "rp", "rt", "rtc", "ruby", "s",
    "samp", "small", "span", "strong", "sub", "sup", "time", "u", "var", "wbr",
    "caption", "col", "colgroup", "table", "tbody", "td", "tfoot", "th",
    "thead", "tr",
}

ARTIFACT_EXTRA_TAGS = {
    "img", "svg", "path", "circle", "line", "polyline", "polygon", "style", "canvas",
}

ALLOWED_TAGS = BASE_ALLOWED_TAGS | ARTIFACT_EXTRA_TAGS

ALLOWED_ATTRIBUTES = {
    "a": {"href", "name", "target"},
    "img": {"src", "srcset", "alt", "title", "width", "height", "loading"},
    "*": {"style", "class", "id"},
}

# Tags removed together with everything inside them
STRIPPED_CONTENT_TAGS = {"script"}


def sanitize_preview(html: str, css: Optional[str] = None) -> str:
    return nh3.clean(
        f"<style>{css or ''}</style>{html}",
        tags=ALLOWED_TAGS,
        clean_content_tags=STRIPPED_CONTENT_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        generic_attribute_prefixes={"data-"},
    )


def build_full_document(html: str, css: Optional[str] = None, js: Optional[str] = None) -> str:
    """Standalone page for the sandboxed iframe. Deliberately unsanitised."""
    parts = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8" />',
        "<style>",
        css or "",
        "</style>",
        "</head>",
        "<body>",
        html,
        f'<script type="module">\n{js}\n</script>' if js else "",
        "</body>",
        "</html>",
    ]
    return "\n".join(part for part in parts if part)


def build_artifact(
    title: str,
    html: str,
    css: Optional[str] = None,
    js: Optional[str] = None,
    description: Optional[str] = None,
) -> Artifact:
    return Artifact(
        id=str(uuid.uuid4()),
        title=title,
        description=description,
        previewHtml=sanitize_preview(html, css),
        fullHtml=build_full_document(html, css, js),
    )
