"""
HTML ➜ Word (.docx) conversion.

Builds a fresh python-docx Document (one body) and walks the HTML tree
parsed by lxml, translating structure and inline styling to
WordprocessingML:

- h1..h6 -> "Heading N" paragraphs
- p, div, section, ... -> paragraphs (block children split them)
- ul / ol (nested up to three levels) -> "List Bullet" / "List Number" styles
- table -> grid table, one cell per td/th
- b, strong, i, em, u, s, sup, sub, code, a, span + inline CSS -> run formatting
- img with a base64 data: URI -> inline picture
- br -> line break, hr -> empty paragraph

Anything else is descended into so its text survives; the conversion is a
structural approximation, not a faithful layout.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass, replace
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, List, Optional

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_BREAK
from docx.shared import Inches, Pt, RGBColor
from lxml import etree, html as lxml_html

from ..errors import ConvertError, OutputWriteError
from ..logging_utils import LOG

HEADING_TAGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
LIST_TAGS = {"ul", "ol"}
PARAGRAPH_TAGS = {
    "p", "div", "section", "article", "header", "footer", "main", "aside",
    "nav", "blockquote", "pre", "address", "figure", "figcaption", "dl", "dt", "dd",
    "body", "form", "fieldset", "center",
}
SKIP_TAGS = {"head", "style", "script", "title", "meta", "link", "noscript", "template"}
BLOCK_TAGS = set(HEADING_TAGS) | LIST_TAGS | PARAGRAPH_TAGS | {"table", "hr", "li", "tr", "td", "th"}

ALIGNMENTS = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
    "justify": WD_ALIGN_PARAGRAPH.JUSTIFY,
}

# Largest picture width that fits a default page between margins
MAX_IMAGE_WIDTH_IN = 6.0

_WS_RE = re.compile(r"\s+")
_HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")
_SIZE_RE = re.compile(r"^(\d+(?:\.\d+)?|\.\d+)\s*(pt|px)?$")
_DATA_URI_RE = re.compile(r"^data:image/[\w.+-]+;base64,(.*)$", re.S)


@dataclass(frozen=True)
class RunFormat:
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strike: bool = False
    superscript: bool = False
    subscript: bool = False
    monospace: bool = False
    color: Optional[RGBColor] = None
    size: Optional[Pt] = None


def parse_inline_style(style: Optional[str]) -> Dict[str, str]:
    """Parse a CSS declaration list ("a: b; c: d") into a dict."""
    props: Dict[str, str] = {}
    if not style:
        return props
    for decl in style.split(";"):
        if ":" not in decl:
            continue
        name, value = decl.split(":", 1)
        props[name.strip().lower()] = value.strip().lower()
    return props


def _parse_color(value: str) -> Optional[RGBColor]:
    m = _HEX_COLOR_RE.match(value.strip())
    if not m:
        return None
    hexval = m.group(1)
    if len(hexval) == 3:
        hexval = "".join(ch * 2 for ch in hexval)
    return RGBColor.from_string(hexval.upper())


def _parse_size(value: str) -> Optional[Pt]:
    m = _SIZE_RE.match(value.strip())
    if not m:
        return None
    amount = float(m.group(1))
    if m.group(2) == "px":
        amount = amount * 0.75
    return Pt(amount) if amount > 0 else None


def apply_css(fmt: RunFormat, props: Dict[str, str]) -> RunFormat:
    changes: Dict[str, Any] = {}
    weight = props.get("font-weight")
    if weight:
        changes["bold"] = weight == "bold" or weight == "bolder" or (weight.isdigit() and int(weight) >= 600)
    if props.get("font-style") in ("italic", "oblique"):
        changes["italic"] = True
    decoration = props.get("text-decoration", "") + " " + props.get("text-decoration-line", "")
    if "underline" in decoration:
        changes["underline"] = True
    if "line-through" in decoration:
        changes["strike"] = True
    if "color" in props:
        color = _parse_color(props["color"])
        if color is not None:
            changes["color"] = color
    if "font-size" in props:
        size = _parse_size(props["font-size"])
        if size is not None:
            changes["size"] = size
    return replace(fmt, **changes) if changes else fmt


def _inline_format(tag: str, el: etree._Element, fmt: RunFormat) -> RunFormat:
    if tag in ("b", "strong", "th"):
        fmt = replace(fmt, bold=True)
    elif tag in ("i", "em", "cite", "var"):
        fmt = replace(fmt, italic=True)
    elif tag in ("u", "ins"):
        fmt = replace(fmt, underline=True)
    elif tag in ("s", "strike", "del"):
        fmt = replace(fmt, strike=True)
    elif tag == "sup":
        fmt = replace(fmt, superscript=True)
    elif tag == "sub":
        fmt = replace(fmt, subscript=True)
    elif tag in ("code", "kbd", "samp", "tt"):
        fmt = replace(fmt, monospace=True)
    elif tag == "a" and el.get("href"):
        fmt = replace(fmt, underline=True, color=RGBColor(0x05, 0x63, 0xC1))
    return apply_css(fmt, parse_inline_style(el.get("style")))


def _tag(el: Any) -> Optional[str]:
    # comments and processing instructions have a callable tag
    tag = el.tag
    if not isinstance(tag, str):
        return None
    return etree.QName(tag).localname.lower()


class _BodyBuilder:
    """
    Appends converted HTML to a block container (document body or table cell).

    Inline content accumulates in the current paragraph; a block element
    closes it so the next inline content starts a new one.
    """

    def __init__(self, container: Any, reuse_paragraph: Any = None):
        self.container = container
        self._reuse = reuse_paragraph
        self._paragraph: Any = None
        self._pending_space = False

    # ---------- paragraphs ----------

    def new_paragraph(self, style: Optional[str] = None, alignment: Any = None) -> Any:
        if self._reuse is not None:
            paragraph = self._reuse
            self._reuse = None
            if style:
                paragraph.style = style
        else:
            paragraph = self.container.add_paragraph(style=style)
        if alignment is not None:
            paragraph.alignment = alignment
        self._paragraph = paragraph
        self._pending_space = False
        return paragraph

    def close_paragraph(self) -> None:
        self._paragraph = None
        self._pending_space = False

    def current_paragraph(self) -> Any:
        if self._paragraph is None:
            self.new_paragraph()
        return self._paragraph

    # ---------- inline ----------

    def add_text(self, text: Optional[str], fmt: RunFormat, preserve: bool = False) -> None:
        if not text:
            return
        if not preserve:
            leading = text[:1].isspace()
            trailing = text[-1:].isspace()
            text = _WS_RE.sub(" ", text).strip()
            if not text:
                if self._paragraph is not None and self._paragraph.runs:
                    self._pending_space = True
                return
            if leading and self._paragraph is not None and self._paragraph.runs:
                self._pending_space = True
        else:
            trailing = False
        paragraph = self.current_paragraph()
        if self._pending_space:
            text = " " + text
        run = paragraph.add_run(text)
        _format_run(run, fmt)
        self._pending_space = trailing

    def add_break(self) -> None:
        self.current_paragraph().add_run().add_break(WD_BREAK.LINE)
        self._pending_space = False

    def add_image(self, el: etree._Element) -> None:
        src = (el.get("src") or "").strip()
        m = _DATA_URI_RE.match(src)
        if not m:
            if src:
                LOG.debug("Skipping non-embedded image: %s", src[:80])
            return
        try:
            data = base64.b64decode(m.group(1), validate=False)
        except (binascii.Error, ValueError) as e:
            LOG.warning("Skipping image with invalid base64 data: %s", e)
            return
        width = _image_width(el)
        try:
            run = self.current_paragraph().add_run()
            run.add_picture(BytesIO(data), width=width)
        except Exception as e:
            # python-docx raises UnrecognizedImageError and friends for unknown payloads
            LOG.warning("Skipping image that could not be embedded: %s: %s", type(e).__name__, e)

    def inline(self, el: etree._Element, fmt: RunFormat, preserve: bool = False) -> None:
        """Convert an element's content as inline runs, handing blocks off to block()."""
        self.add_text(el.text, fmt, preserve)
        for child in el:
            tag = _tag(child)
            if tag is None or tag in SKIP_TAGS:
                pass
            elif tag in BLOCK_TAGS:
                self.block(child, fmt)
            elif tag == "br":
                self.add_break()
            elif tag == "img":
                self.add_image(child)
            else:
                self.inline(child, _inline_format(tag, child, fmt), preserve)
            self.add_text(child.tail, fmt, preserve)

    # ---------- blocks ----------

    def block(self, el: etree._Element, fmt: RunFormat, list_depth: int = 0) -> None:
        tag = _tag(el)
        if tag is None or tag in SKIP_TAGS:
            return
        props = parse_inline_style(el.get("style"))
        alignment = ALIGNMENTS.get(props.get("text-align", ""))
        fmt = apply_css(fmt, props)

        if tag in HEADING_TAGS:
            self.close_paragraph()
            self.new_paragraph(style=f"Heading {HEADING_TAGS[tag]}", alignment=alignment)
            self.inline(el, fmt)
            self.close_paragraph()
        elif tag in LIST_TAGS:
            self.close_paragraph()
            self.list(el, fmt, ordered=(tag == "ol"), depth=list_depth + 1)
            self.close_paragraph()
        elif tag == "li":
            self.close_paragraph()
            self.list_item(el, fmt, ordered=False, depth=max(1, list_depth))
        elif tag == "table":
            self.close_paragraph()
            self.table(el, fmt)
            self.close_paragraph()
        elif tag in ("tr", "td", "th"):
            # stray table parts outside a table: keep their text
            self.close_paragraph()
            self.new_paragraph(alignment=alignment)
            self.inline(el, _inline_format(tag, el, fmt))
            self.close_paragraph()
        elif tag == "hr":
            self.close_paragraph()
            self.new_paragraph()
            self.close_paragraph()
        else:
            self.close_paragraph()
            if alignment is not None:
                self.new_paragraph(alignment=alignment)
            self.inline(el, fmt, preserve=(tag == "pre"))
            self.close_paragraph()

    def list(self, el: etree._Element, fmt: RunFormat, ordered: bool, depth: int) -> None:
        for child in el:
            tag = _tag(child)
            if tag == "li":
                self.list_item(child, fmt, ordered, depth)
            elif tag in LIST_TAGS:
                self.list(child, fmt, ordered=(tag == "ol"), depth=depth + 1)
            elif tag is not None and tag not in SKIP_TAGS:
                self.block(child, fmt, list_depth=depth)

    def list_item(self, el: etree._Element, fmt: RunFormat, ordered: bool, depth: int) -> None:
        base = "List Number" if ordered else "List Bullet"
        style = base if depth <= 1 else f"{base} {min(depth, 3)}"
        self.new_paragraph(style=style)
        self.add_text(el.text, fmt)
        for child in el:
            tag = _tag(child)
            if tag is None or tag in SKIP_TAGS:
                pass
            elif tag in LIST_TAGS:
                self.close_paragraph()
                self.list(child, fmt, ordered=(tag == "ol"), depth=depth + 1)
            elif tag in BLOCK_TAGS:
                # block content inside an item stays in the item's paragraph
                self.inline(child, apply_css(fmt, parse_inline_style(child.get("style"))))
            elif tag == "br":
                self.add_break()
            elif tag == "img":
                self.add_image(child)
            else:
                self.inline(child, _inline_format(tag, child, fmt))
            self.add_text(child.tail, fmt)
        self.close_paragraph()

    def table(self, el: etree._Element, fmt: RunFormat) -> None:
        rows = _table_rows(el)
        if not rows:
            return
        n_cols = max(len(cells) for cells in rows)
        if n_cols == 0:
            return
        table = self.container.add_table(rows=len(rows), cols=n_cols)
        try:
            table.style = "Table Grid"
        except KeyError:
            LOG.debug("Table Grid style not available; using default table style")
        for r_idx, cells in enumerate(rows):
            for c_idx, cell_el in enumerate(cells):
                cell = table.cell(r_idx, c_idx)
                builder = _BodyBuilder(cell, reuse_paragraph=cell.paragraphs[0])
                cell_fmt = _inline_format(_tag(cell_el) or "td", cell_el, fmt)
                builder.inline(cell_el, cell_fmt)


def _table_rows(table_el: etree._Element) -> List[List[etree._Element]]:
    rows: List[List[etree._Element]] = []
    for child in table_el:
        tag = _tag(child)
        if tag == "tr":
            rows.append(_row_cells(child))
        elif tag in ("thead", "tbody", "tfoot"):
            for tr in child:
                if _tag(tr) == "tr":
                    rows.append(_row_cells(tr))
    return rows


def _row_cells(tr: etree._Element) -> List[etree._Element]:
    return [cell for cell in tr if _tag(cell) in ("td", "th")]


def _image_width(el: etree._Element) -> Optional[Inches]:
    raw_width = el.get("width") or parse_inline_style(el.get("style")).get("width", "")
    m = _SIZE_RE.match(raw_width.strip().lower()) if raw_width else None
    if not m:
        return None
    px = float(m.group(1))
    if m.group(2) == "pt":
        px = px / 0.75
    if px <= 0:
        return None
    return Inches(min(px / 96.0, MAX_IMAGE_WIDTH_IN))


def _format_run(run: Any, fmt: RunFormat) -> None:
    if fmt.bold:
        run.bold = True
    if fmt.italic:
        run.italic = True
    if fmt.underline:
        run.underline = True
    if fmt.strike:
        run.font.strike = True
    if fmt.superscript:
        run.font.superscript = True
    if fmt.subscript:
        run.font.subscript = True
    if fmt.monospace:
        run.font.name = "Courier New"
    if fmt.color is not None:
        run.font.color.rgb = fmt.color
    if fmt.size is not None:
        run.font.size = fmt.size


class HtmlDocxConverter:
    """
    Converts rendered HTML into a .docx document.
    """

    def build(self, html_text: str) -> Any:
        """Parse the HTML and return the populated python-docx Document."""
        document = Document()
        if not html_text or not html_text.strip():
            return document
        try:
            root = lxml_html.document_fromstring(html_text)
        except (etree.ParserError, ValueError) as e:
            raise ConvertError(f"Cannot parse rendered HTML: {e}") from e

        body = root.find("body")
        if body is None:
            body = root
        builder = _BodyBuilder(document)
        builder.inline(body, RunFormat())
        return document

    def convert(self, html_text: str) -> bytes:
        """Convert HTML to the bytes of a .docx package."""
        document = self.build(html_text)
        buffer = BytesIO()
        try:
            document.save(buffer)
        except Exception as e:
            raise ConvertError(f"Cannot serialize document: {type(e).__name__}: {e}") from e
        return buffer.getvalue()

    def write(self, html_text: str, output_path: Path) -> Path:
        data = self.convert(html_text)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(data)
        except OSError as e:
            raise OutputWriteError(f"Cannot write {output_path}: {e}") from e
        return output_path
