"""XML reply parsing for accurev ``-fx`` output.

accurev does not promise a single root element, so replies are parsed as a
fragment: XML declarations are dropped and the content is wrapped in a
synthetic ``<reply>`` element before handing it to lxml.
"""

from __future__ import annotations

import codecs
import re

from lxml import etree

from accubridge_core.errors import MalformedReply

_DECLARATION_RE = re.compile(rb"<\?xml[^>]*\?>")
_ENCODING_RE = re.compile(rb"""encoding\s*=\s*["']([A-Za-z0-9._-]+)["']""")
_WRAPPER = "reply"

_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)


class ReplyDocument:
    """Navigable view over a parsed reply."""

    def __init__(self, root: etree._Element) -> None:
        self.root = root

    def select(self, xpath: str, **variables: str) -> list[etree._Element]:
        """All elements matching *xpath*, in document order."""
        result = self.root.xpath(xpath, **variables)
        return [node for node in result if isinstance(node, etree._Element)]

    def select_one(self, xpath: str, **variables: str) -> etree._Element | None:
        matches = self.select(xpath, **variables)
        return matches[0] if matches else None

    @staticmethod
    def select_from(element: etree._Element, xpath: str, **variables: str) -> list[etree._Element]:
        """Elements matching *xpath* relative to *element*."""
        return [n for n in element.xpath(xpath, **variables) if isinstance(n, etree._Element)]

    @staticmethod
    def attr(element: etree._Element, name: str, default: str = "") -> str:
        return element.get(name, default)

    @staticmethod
    def text(element: etree._Element) -> str:
        """Concatenated text of the element and its descendants."""
        return "".join(element.itertext())

    def __len__(self) -> int:
        return len(self.root)


def _declared_encoding(declaration: bytes) -> str | None:
    match = _ENCODING_RE.search(declaration)
    if match is None:
        return None
    return match.group(1).decode("ascii")


def parse_reply(data: bytes) -> ReplyDocument:
    """Parse raw tool output into a ReplyDocument, raising MalformedReply.

    The encoding named in the first XML declaration, if any, is honoured;
    otherwise the output is read as UTF-8.
    """
    body = _DECLARATION_RE.sub(b"", data)
    declaration = _DECLARATION_RE.search(data)
    encoding = _declared_encoding(declaration.group(0)) if declaration else None
    if encoding:
        try:
            codec = codecs.lookup(encoding)
        except LookupError:
            raise MalformedReply(f"unknown encoding {encoding!r}", data) from None
        if codec.name != "utf-8":
            try:
                body = body.decode(codec.name).encode("utf-8")
            except UnicodeDecodeError as e:
                raise MalformedReply(str(e), data) from e
    wrapped = b"<" + _WRAPPER.encode() + b">" + body + b"</" + _WRAPPER.encode() + b">"
    try:
        root = etree.fromstring(wrapped, _PARSER)
    except etree.XMLSyntaxError as e:
        raise MalformedReply(str(e), data) from e
    return ReplyDocument(root)
