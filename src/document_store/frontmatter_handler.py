"""YAML frontmatter parsing and surgical rewriting for content files.

A content file is an optional YAML header between ``---`` lines followed by
an opaque body (MDX, Markdown, anything). The editable content tree lives
under one top-level header key (``microtext`` by default)::

    ---
    title: Home
    layout: ../layouts/Base.astro
    microtext:
      hero:
        headline: Ship faster
    ---
    <Hero />

When a document is written back only the content key's block is
re-serialised. Every other header line and the whole body are copied
through byte-for-byte.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import yaml

from src.content_tree.errors import ValidationError
from src.content_tree.models import ObjectNode, from_data, to_data

from .errors import DocumentFormatError

logger = logging.getLogger(__name__)


@dataclass
class ContentDocument:
    """A parsed content file.

    Attributes:
        file_path: Location of the file (for error messages)
        content_field: Header key that holds the content tree
        text: Original file text
        tree: Content tree parsed from the header
        header: Parsed header mapping (all fields)
        header_span: (start, end) of the header YAML text within ``text``,
            or None when the file has no frontmatter
        header_suffix: Text appended after a rewritten header to keep the
            closing delimiter on its own line
    """
    file_path: str
    content_field: str
    text: str
    tree: ObjectNode = field(default_factory=ObjectNode)
    header: Dict[str, Any] = field(default_factory=dict)
    header_span: Optional[Tuple[int, int]] = None
    header_suffix: str = ""

    @property
    def has_frontmatter(self) -> bool:
        return self.header_span is not None


class FrontmatterHandler:
    """Parses content files and renders them back after tree mutations."""

    # Header between --- delimiters; the YAML text itself may be empty
    FRONTMATTER_PATTERN = re.compile(
        r'\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)',
        re.DOTALL
    )

    OPENING_PATTERN = re.compile(r'\A---[ \t]*\r?\n')

    @classmethod
    def parse(cls, file_path: str, text: str, content_field: str) -> ContentDocument:
        """Parse a content file.

        Files without frontmatter, and headers without the content key,
        yield an empty tree.

        Raises:
            DocumentFormatError: If the header is not valid YAML, is not a
                mapping, or its content key does not hold a mapping
        """
        match = cls.FRONTMATTER_PATTERN.match(text)
        if not match:
            return ContentDocument(file_path=file_path, content_field=content_field, text=text)

        header_text = match.group(1)
        if header_text is None:
            start = cls.OPENING_PATTERN.match(text).end()
            span = (start, start)
            suffix = "\n"
            header_text = ""
        else:
            span = match.span(1)
            suffix = ""

        try:
            header = yaml.safe_load(header_text) if header_text.strip() else {}
        except yaml.YAMLError as e:
            raise DocumentFormatError(file_path, f"Invalid YAML syntax: {str(e)}")

        if header is None:
            header = {}
        if not isinstance(header, dict):
            raise DocumentFormatError(
                file_path,
                f"Frontmatter must be a YAML dictionary, got {type(header).__name__}"
            )

        content = header.get(content_field)
        if content is None:
            tree = ObjectNode()
        elif isinstance(content, dict):
            try:
                tree = from_data(content)
            except ValidationError as e:
                raise DocumentFormatError(file_path, e.original_message)
        else:
            raise DocumentFormatError(
                file_path,
                f"Field '{content_field}' must be a YAML dictionary, got {type(content).__name__}"
            )

        return ContentDocument(
            file_path=file_path,
            content_field=content_field,
            text=text,
            tree=tree,
            header=header,
            header_span=span,
            header_suffix=suffix,
        )

    @classmethod
    def render(cls, document: ContentDocument) -> str:
        """Render the document with its current tree.

        Returns:
            Full file text. Outside the content key's block the result is
            identical to ``document.text``, unless the header had to be
            re-serialised as a whole (flow-style header, or another field
            aliasing an anchor inside the content block).

        Raises:
            DocumentFormatError: If the rendered header does not read back
                as the document's tree and other header fields
        """
        block = cls._dump_content_block(document)

        if not document.has_frontmatter:
            rendered = f"---\n{block}---\n{document.text}"
        else:
            start, end = document.header_span
            header_text = document.text[start:end]
            new_header = cls._replace_content_block(document, header_text, block)
            rendered = document.text[:start] + new_header + document.header_suffix + document.text[end:]

        cls._verify_render(document, rendered)
        return rendered

    @classmethod
    def _verify_render(cls, document: ContentDocument, rendered: str) -> None:
        reparsed = cls.parse(document.file_path, rendered, document.content_field)
        if to_data(reparsed.tree) != to_data(document.tree):
            raise DocumentFormatError(
                document.file_path,
                f"Rewritten '{document.content_field}' block does not read back as written"
            )
        others = {k: v for k, v in document.header.items() if k != document.content_field}
        reparsed_others = {k: v for k, v in reparsed.header.items() if k != document.content_field}
        if reparsed_others != others:
            raise DocumentFormatError(
                document.file_path,
                "Rewriting the content block changed other frontmatter fields"
            )

    @classmethod
    def _dump_content_block(cls, document: ContentDocument) -> str:
        return yaml.safe_dump(
            {document.content_field: to_data(document.tree)},
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

    @classmethod
    def _dump_header(cls, document: ContentDocument, newline: str) -> str:
        logger.debug(f"Re-serialising full header of {document.file_path}")
        header = dict(document.header)
        header[document.content_field] = to_data(document.tree)
        dumped = yaml.safe_dump(
            header,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )
        return newline.join(dumped.rstrip("\n").split("\n"))

    @classmethod
    def _replace_content_block(cls, document: ContentDocument, header_text: str, block: str) -> str:
        """Swap the content key's lines in the header text for ``block``.

        The block's extent comes from the composed YAML node marks, so
        comments, blank lines and unusual indentation inside the block are
        all covered by the replacement.
        """
        newline = "\r\n" if "\r\n" in header_text else "\n"
        block_lines = block.rstrip("\n").split("\n")

        root = yaml.compose(header_text, Loader=yaml.SafeLoader) if header_text.strip() else None
        if root is None:
            if not header_text.strip():
                return newline.join(block_lines)
            return header_text + newline + newline.join(block_lines)
        if root.flow_style:
            return cls._dump_header(document, newline)

        entry = None
        for key_node, value_node in root.value:
            if isinstance(key_node, yaml.ScalarNode) and key_node.value == document.content_field:
                entry = (key_node, value_node)

        if entry is None:
            return header_text + newline + newline.join(block_lines)

        key_node, value_node = entry
        if cls._shares_nodes(root, value_node):
            return cls._dump_header(document, newline)

        lines = header_text.split(newline)
        start = key_node.start_mark.line
        end_mark = value_node.end_mark
        end = end_mark.line if end_mark.column == 0 else end_mark.line + 1
        # Trailing blank lines and column-0 comments belong to whatever follows
        while end > start + 1 and (not lines[end - 1].strip() or lines[end - 1].startswith("#")):
            end -= 1

        return newline.join(lines[:start] + block_lines + lines[end:])

    @classmethod
    def _shares_nodes(cls, root: yaml.MappingNode, value_node: yaml.Node) -> bool:
        """Whether any other top-level field aliases a node of ``value_node``."""
        inside = {id(node) for node in cls._walk(value_node)}
        for key_node, other in root.value:
            if other is value_node:
                continue
            if any(id(node) in inside for node in cls._walk(key_node)):
                return True
            if any(id(node) in inside for node in cls._walk(other)):
                return True
        return False

    @classmethod
    def _walk(cls, node: yaml.Node, seen: Optional[set] = None):
        if seen is None:
            seen = set()
        if id(node) in seen:
            return
        seen.add(id(node))
        yield node
        if isinstance(node, yaml.SequenceNode):
            for item in node.value:
                yield from cls._walk(item, seen)
        elif isinstance(node, yaml.MappingNode):
            for key, value in node.value:
                yield from cls._walk(key, seen)
                yield from cls._walk(value, seen)
