"""
Gallery feed serializer.

Writes the feed document as indented Atom XML.
"""

import io
from datetime import datetime
from typing import BinaryIO
from xml.etree import ElementTree as ET

from .models import ATOM_NS, GALLERY_NS, FeedDocument, FeedEntry

GALLERY_PREFIX = "vsx"

# Atom is written as the default namespace
ET.register_namespace("", ATOM_NS)
ET.register_namespace(GALLERY_PREFIX, GALLERY_NS)


def _atom(tag: str) -> str:
    return f"{{{ATOM_NS}}}{tag}"


def _gallery(tag: str) -> str:
    return f"{{{GALLERY_NS}}}{tag}"


def format_timestamp(value: datetime) -> str:
    return value.isoformat()


def _text(parent: ET.Element, tag: str, text: str, **attrib: str) -> ET.Element:
    elem = ET.SubElement(parent, tag, attrib)
    elem.text = text
    return elem


def _build_entry(parent: ET.Element, entry: FeedEntry) -> None:
    elem = ET.SubElement(parent, _atom("entry"))
    _text(elem, _atom("id"), entry.id)
    _text(elem, _atom("title"), entry.title, type="text")
    if entry.link:
        ET.SubElement(elem, _atom("link"), rel="alternate", href=entry.link)
    _text(elem, _atom("summary"), entry.summary, type="text")
    if entry.published:
        _text(elem, _atom("published"), format_timestamp(entry.published))
    if entry.updated:
        _text(elem, _atom("updated"), format_timestamp(entry.updated))

    author = ET.SubElement(elem, _atom("author"))
    _text(author, _atom("name"), entry.author_name)

    if entry.link:
        ET.SubElement(elem, _atom("content"), type="application/octet-stream", src=entry.link)
    if entry.icon_link:
        ET.SubElement(elem, _atom("link"), rel="icon", href=entry.icon_link)

    if entry.vsix is not None:
        vsix = ET.SubElement(elem, _gallery("Vsix"))
        _text(vsix, _gallery("Id"), entry.vsix.id)
        _text(vsix, _gallery("Version"), entry.vsix.version)
        references = ET.SubElement(vsix, _gallery("References"))
        for reference in entry.vsix.references:
            _text(references, _gallery("Reference"), reference)


def build_feed_element(document: FeedDocument) -> ET.Element:
    """Build the Atom element tree for a feed document."""
    feed = ET.Element(_atom("feed"))
    _text(feed, _atom("title"), document.title, type="text")
    _text(feed, _atom("id"), document.id)
    if document.updated:
        _text(feed, _atom("updated"), format_timestamp(document.updated))

    for entry in document.entries:
        _build_entry(feed, entry)

    return feed


def serialize_feed(document: FeedDocument, sink: BinaryIO | None = None) -> bytes:
    """
    Serialize a feed document to UTF-8 Atom XML.

    Args:
        document: Feed to serialize.
        sink: Optional stream to also write to. It is flushed but left open.

    Returns:
        Serialized XML bytes.
    """
    tree = ET.ElementTree(build_feed_element(document))
    ET.indent(tree, space="  ")

    output = io.BytesIO()
    tree.write(output, encoding="utf-8", xml_declaration=True)
    content = output.getvalue()

    if sink is not None:
        sink.write(content)
        sink.flush()

    return content
