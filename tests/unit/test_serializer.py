"""Unit tests for the gallery feed serializer."""

import io
from datetime import UTC, datetime
from xml.etree import ElementTree as ET

import feedparser

from gallery_feed.document import new_feed_document, parse_feed_document
from gallery_feed.merge import merge_entry
from gallery_feed.models import ATOM_NS, GALLERY_NS, VSIX_NS, ExtensionManifest
from gallery_feed.serializer import serialize_feed

BASE = "https://cdn.example.com/beta"
NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


class _TrackingSink(io.BytesIO):
    def __init__(self):
        super().__init__()
        self.close_calls = 0

    def close(self):
        self.close_calls += 1
        super().close()


def _document():
    document = new_feed_document()
    document = merge_entry(
        document,
        ExtensionManifest(identity="A", version="1.0", display_name="Alpha", publisher="Acme"),
        archive_name="Alpha",
        link_base=BASE,
        now=NOW,
    )
    return merge_entry(
        document,
        ExtensionManifest(identity="B", version="2.0", description="Beta & co <tools>"),
        archive_name="Beta",
        link_base=BASE,
        icon_available=True,
        now=NOW,
    )


def test_output_is_well_formed_atom_with_fixed_namespaces():
    content = serialize_feed(_document())
    root = ET.fromstring(content)

    assert content.startswith(b"<?xml")
    assert root.tag == f"{{{ATOM_NS}}}feed"
    assert root.find(f"{{{ATOM_NS}}}entry/{{{GALLERY_NS}}}Vsix/{{{GALLERY_NS}}}Version") is not None
    assert ATOM_NS.encode() in content
    assert GALLERY_NS.encode() in content
    assert VSIX_NS.encode() not in content


def test_element_order():
    root = ET.fromstring(serialize_feed(_document()))

    assert [child.tag.split("}")[1] for child in root] == ["title", "id", "updated", "entry", "entry"]
    entry = root.find(f"{{{ATOM_NS}}}entry")
    assert [child.tag.split("}")[1] for child in entry] == [
        "id",
        "title",
        "link",
        "summary",
        "published",
        "updated",
        "author",
        "content",
        "link",
        "Vsix",
    ]


def test_icon_link_only_when_present():
    root = ET.fromstring(serialize_feed(_document()))
    beta, alpha = root.findall(f"{{{ATOM_NS}}}entry")

    assert [link.get("rel") for link in beta.findall(f"{{{ATOM_NS}}}link")] == ["alternate", "icon"]
    assert [link.get("rel") for link in alpha.findall(f"{{{ATOM_NS}}}link")] == ["alternate"]


def test_output_is_indented():
    content = serialize_feed(_document()).decode("utf-8")

    assert "\n  <entry>" in content


def test_writes_to_sink_without_closing():
    sink = _TrackingSink()

    content = serialize_feed(_document(), sink)

    assert sink.close_calls == 0
    assert not sink.closed
    assert sink.getvalue() == content


def test_round_trips_through_parser():
    document = _document()

    reloaded = parse_feed_document(serialize_feed(document))

    assert reloaded == document


def test_feed_readers_can_parse_output():
    parsed = feedparser.parse(serialize_feed(_document()))

    assert not parsed.bozo
    assert parsed.feed.title == "Extension Gallery"
    assert [entry.id for entry in parsed.entries] == ["B", "A"]
    assert parsed.entries[1].title == "Alpha"
    assert parsed.entries[1].author == "Acme"
    assert parsed.entries[1].link == f"{BASE}/Alpha.vsix"


def test_atom_is_default_namespace():
    content = serialize_feed(_document())

    assert b'<feed xmlns="http://www.w3.org/2005/Atom"' in content
    assert b'xmlns:vsx="http://schemas.microsoft.com/developer/vsx-syndication-schema/2010"' in content
    assert b"<entry>" in content
    assert b"<vsx:Vsix>" in content


def test_empty_document_serializes():
    content = serialize_feed(new_feed_document())

    root = ET.fromstring(content)
    assert [child.tag for child in root] == [f"{{{ATOM_NS}}}title", f"{{{ATOM_NS}}}id"]
