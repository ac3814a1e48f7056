# sitebuilder/domain/blocks/html.py
"""
HTML fragments for each block type.

Every author-supplied string is escaped with MarkupSafe before it is
embedded, and line breaks in free text become ``<br>``. The one
exception is the body of a ``columns`` block, see ``render_columns``.
Fragments never carry script or inline event handlers.
"""
from __future__ import annotations

from typing import Any, Mapping

from markupsafe import Markup, escape

from sitebuilder.domain.exceptions import BlockRenderError

UNSAFE_URL_SCHEMES = ("javascript:", "vbscript:", "data:")

CONTACT_FORM = Markup("""
    <form method="POST" action="/contact" class="contact-form">
        <div class="contact-field">
            <label for="contact-name">Name:</label>
            <input type="text" id="contact-name" name="name" required>
        </div>
        <div class="contact-field">
            <label for="contact-email">Email:</label>
            <input type="email" id="contact-email" name="email" required>
        </div>
        <div class="contact-field">
            <label for="contact-subject">Subject:</label>
            <input type="text" id="contact-subject" name="subject" required>
        </div>
        <div class="contact-field">
            <label for="contact-message">Message:</label>
            <textarea id="contact-message" name="message" rows="6" required></textarea>
        </div>
        <button type="submit">Send Message</button>
    </form>""")


def _text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    return "" if value is None else str(value)


def nl2br(value: str) -> Markup:
    """Escape ``value`` and turn its line breaks into ``<br>``."""
    lines = str(value).replace("\r\n", "\n").split("\n")
    return Markup("<br>").join(escape(line) for line in lines)


def safe_href(url: str) -> Markup:
    compact = "".join(url.split()).lower()
    if compact.startswith(UNSAFE_URL_SCHEMES):
        return Markup("#")
    return escape(url)


def embed_url(url: str) -> str:
    """
    Convert a YouTube or Vimeo page URL into its embeddable player URL.
    Returns an empty string for anything unrecognised.
    """
    if "youtube.com/watch?v=" in url:
        parts = url.split("v=")
        if len(parts) == 2:
            return "https://www.youtube.com/embed/" + parts[1].split("&")[0]

    if "youtu.be/" in url:
        parts = url.split("youtu.be/")
        if len(parts) == 2:
            return "https://www.youtube.com/embed/" + parts[1].split("?")[0]

    if "vimeo.com/" in url and "player.vimeo.com/video/" not in url:
        parts = url.split("vimeo.com/")
        if len(parts) == 2:
            video_id = parts[1].split("/")[0].split("?")[0]
            return "https://player.vimeo.com/video/" + video_id

    if "youtube.com/embed/" in url or "player.vimeo.com/video/" in url:
        return url

    return ""


def render_text(payload: Mapping[str, Any]) -> Markup:
    return Markup('<div class="text-block">{}</div>').format(
        nl2br(_text(payload, "content"))
    )


def render_heading(payload: Mapping[str, Any]) -> Markup:
    level = payload.get("level")
    if not isinstance(level, int) or isinstance(level, bool) or not 2 <= level <= 6:
        level = 2

    return Markup('<h{0} class="heading-block">{1}</h{0}>').format(
        level, nl2br(_text(payload, "text"))
    )


def render_image(payload: Mapping[str, Any]) -> Markup:
    html = Markup('<div class="image-block"><img src="{}" alt="{}">').format(
        safe_href(_text(payload, "url")), _text(payload, "alt")
    )

    caption = _text(payload, "caption")
    if caption:
        html += Markup('<p class="image-caption">{}</p>').format(nl2br(caption))

    return html + Markup("</div>")


def render_quote(payload: Mapping[str, Any]) -> Markup:
    html = Markup('<blockquote class="quote-block"><p>{}</p>').format(
        nl2br(_text(payload, "quote"))
    )

    author = _text(payload, "author")
    if author:
        html += Markup("<footer>&mdash; {}</footer>").format(author)

    return html + Markup("</blockquote>")


def render_button(payload: Mapping[str, Any]) -> Markup:
    style = "secondary" if payload.get("style") == "secondary" else "primary"

    return Markup(
        '<div class="button-block"><a class="button button-{}" href="{}">{}</a></div>'
    ).format(style, safe_href(_text(payload, "url")), _text(payload, "text"))


def render_video(payload: Mapping[str, Any]) -> Markup:
    url = _text(payload, "url")
    src = embed_url(url)
    if not src:
        raise BlockRenderError(f"Invalid video URL: {url!r}")

    return Markup(
        '<div class="video-block"><iframe src="{}" frameborder="0" '
        'allow="accelerometer; autoplay; clipboard-write; encrypted-media; '
        'gyroscope; picture-in-picture" allowfullscreen></iframe></div>'
    ).format(src)


def render_spacer(payload: Mapping[str, Any]) -> Markup:
    height = payload.get("height")
    if not isinstance(height, int) or isinstance(height, bool) or height <= 0:
        height = 40

    return Markup('<div class="spacer-block" style="height: {}px;"></div>').format(height)


def render_contact(payload: Mapping[str, Any]) -> Markup:
    html = Markup('<div class="contact-form-block"><h2>{}</h2>').format(
        _text(payload, "title") or "Get in Touch"
    )

    subtitle = _text(payload, "subtitle")
    if subtitle:
        html += Markup("<p>{}</p>").format(nl2br(subtitle))

    return html + CONTACT_FORM + Markup("</div>")


def render_columns(payload: Mapping[str, Any]) -> Markup:
    """
    Column bodies are rich HTML written by an authenticated site admin
    through the editor toolbar, and are embedded WITHOUT escaping. This
    is a reduced-trust zone: only admins of the owning tenant can write
    it. Do not route visitor-supplied text into a columns block.
    """
    count = payload.get("column_count")
    if count not in (2, 3, 4):
        count = 2

    columns = payload.get("columns") or []
    if not isinstance(columns, list):
        raise BlockRenderError("columns payload must hold a list of columns")

    html = Markup(
        '<div class="columns-block" style="display: grid; '
        'grid-template-columns: repeat({}, 1fr);">'
    ).format(count)

    for column in columns:
        content = _text(column, "content") if isinstance(column, Mapping) else ""
        html += Markup('<div class="column">{}</div>').format(
            Markup(content.replace("\n", "<br>"))
        )

    return html + Markup("</div>")
