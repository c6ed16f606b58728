"""Document store: durable, per-file mutations of content trees.

Each public operation is one read -> parse -> mutate -> serialise -> write
cycle over a single content file. No locks are taken; concurrent writers to
the same page race and the later write wins, unless the caller presents the
revision token it read, in which case a stale token fails with
ConflictError.
"""

import copy
import hashlib
import logging
from typing import Any, Dict, List, Optional, Tuple

from src.content_tree.addressing import assign, parse_path, resolve, resolve_text
from src.content_tree.errors import (
    IndexOutOfRangeError,
    InvalidPathError,
    ValidationError,
)
from src.content_tree.models import ArrayNode, Leaf, ObjectNode, from_data, to_data

from .errors import ConflictError, PageNotFoundError, StaleValueError
from .frontmatter_handler import ContentDocument, FrontmatterHandler
from .models import ARRAY_OPS, ArrayInfo, ArrayOpResult, FieldUpdate
from .storage import StorageBackend

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_FIELD = "microtext"
DEFAULT_EXTENSION = ".mdx"
DEFAULT_PAGE_ID = "index"
DEFAULT_TEMPLATE: Dict[str, Any] = {"title": "New Item", "desc": "Description"}


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


class DocumentStore:
    """Reads and mutates the content tree of one page file at a time.

    Page ids map to files under the backend's root: ``about`` resolves to
    ``about.mdx`` or, failing that, ``about/index.mdx``. An empty page id
    means ``index``.

    Example:
        >>> store = DocumentStore(FilesystemBackend("src/pages"))
        >>> store.set_field("home", "hero.headline", "Ship faster")
        FieldUpdate(page_id='home', path='hero.headline', previous_value='A', new_value='Ship faster')
    """

    def __init__(
        self,
        backend: StorageBackend,
        content_field: str = DEFAULT_CONTENT_FIELD,
        extension: str = DEFAULT_EXTENSION,
        default_template: Optional[Dict[str, Any]] = None,
    ):
        self.backend = backend
        self.content_field = content_field
        self.extension = extension
        self.default_template = default_template if default_template is not None else DEFAULT_TEMPLATE

    # -- page resolution -------------------------------------------------

    def _normalise_page_id(self, page_id: str) -> str:
        if page_id is None:
            return DEFAULT_PAGE_ID
        if not isinstance(page_id, str):
            raise ValidationError(f"must be a string, got {type(page_id).__name__}", "pageId")
        slug = page_id.strip().strip('/')
        return slug or DEFAULT_PAGE_ID

    def _locate(self, page_id: str) -> str:
        """Return the relative file path for a page id.

        Raises:
            InvalidPathError: If the candidate file lies outside the content root
            PageNotFoundError: If no candidate file exists
        """
        slug = self._normalise_page_id(page_id)
        candidates = [f"{slug}{self.extension}", f"{slug}/index{self.extension}"]
        for candidate in candidates:
            if self.backend.exists(candidate):
                return candidate
        raise PageNotFoundError(slug)

    def _page_id_for(self, relative_path: str) -> str:
        stem = relative_path[:-len(self.extension)]
        if stem == "index":
            return stem
        if stem.endswith("/index"):
            return stem[:-len("/index")]
        return stem

    def _load(self, page_id: str) -> Tuple[str, ContentDocument]:
        relative_path = self._locate(page_id)
        text = self.backend.read_text(relative_path)
        document = FrontmatterHandler.parse(
            self.backend.describe(relative_path), text, self.content_field
        )
        return relative_path, document

    def _save(self, relative_path: str, document: ContentDocument) -> None:
        self.backend.write_text(relative_path, FrontmatterHandler.render(document))

    @staticmethod
    def _revision_of(text: str) -> str:
        return hashlib.sha256(text.encode('utf-8')).hexdigest()

    def _check_revision(
        self, page_id: str, document: ContentDocument, expected_revision: Optional[str]
    ) -> None:
        if expected_revision is None:
            return
        actual = self._revision_of(document.text)
        if actual != expected_revision:
            raise ConflictError(page_id, expected_revision, actual)

    # -- reads -----------------------------------------------------------

    def list_pages(self) -> List[str]:
        """List the ids of every content file under the root."""
        pages = [self._page_id_for(path) for path in self.backend.list_files(self.extension)]
        return sorted(set(pages))

    def get(self, page_id: str) -> ObjectNode:
        """Return the page's content tree.

        Raises:
            PageNotFoundError: If the page file does not exist
        """
        _, document = self._load(page_id)
        logger.debug(f"Read {len(document.tree)} top-level field(s) from page {page_id}")
        return document.tree

    def revision(self, page_id: str) -> str:
        """Return an opaque token identifying the page file's current contents."""
        relative_path = self._locate(page_id)
        return self._revision_of(self.backend.read_text(relative_path))

    def get_array(self, page_id: str, array_path: str) -> ArrayInfo:
        """Return the items of the array at ``array_path`` (empty if absent)."""
        parse_path(array_path)
        node = resolve(self.get(page_id), array_path)
        if node is None or (isinstance(node, Leaf) and node.value is None):
            return ArrayInfo(array_path=array_path)
        if not isinstance(node, ArrayNode):
            raise InvalidPathError(array_path, "path does not address an array")
        return ArrayInfo(array_path=array_path, items=[to_data(item) for item in node.items])

    # -- writes ----------------------------------------------------------

    def set_field(
        self,
        page_id: str,
        path: str,
        value: str,
        expected_value: Any = UNSET,
        expected_revision: Optional[str] = None,
    ) -> FieldUpdate:
        """Set the text at ``path``, creating it if absent.

        Args:
            page_id: Page to write
            path: Dot path of the field (e.g., "features.0.title")
            value: New text
            expected_value: When given, the write only happens if the live
                value equals it (None meaning "currently unset")
            expected_revision: When given, the write only happens if the
                file is unchanged since that revision was read

        Returns:
            FieldUpdate with the previous and new values

        Raises:
            ValidationError: If value is not a string
            InvalidPathError: If the path is malformed, escapes the root,
                would reshape existing data or holds a non-text value
            PageNotFoundError: If the page does not exist
            StaleValueError: If expected_value does not match
            ConflictError: If expected_revision does not match
        """
        if not isinstance(value, str):
            raise ValidationError(f"must be a string, got {type(value).__name__}", "value")
        parse_path(path)

        relative_path, document = self._load(page_id)
        self._check_revision(page_id, document, expected_revision)

        previous = resolve_text(document.tree, path)
        if expected_value is not UNSET and previous != expected_value:
            raise StaleValueError(page_id, path, expected_value, previous)

        update = FieldUpdate(page_id=page_id, path=path, previous_value=previous, new_value=value)
        if not update.changed:
            logger.debug(f"No change for {page_id}#{path}")
            return update

        assign(document.tree, path, value)
        self._save(relative_path, document)
        logger.info(f"Updated {page_id}#{path}: {previous!r} -> {value!r}")
        return update

    def array_op(
        self,
        page_id: str,
        array_path: str,
        op: str,
        index: Optional[int] = None,
        template: Any = None,
        expected_revision: Optional[str] = None,
    ) -> ArrayOpResult:
        """Append to, or remove from, the array at ``array_path``.

        ``add`` appends ``template`` (or the default placeholder), creating
        the array if needed. ``remove`` deletes the item at ``index`` and
        shifts later items down. Removal is not idempotent: retrying a
        successful removal targets a different item.

        Raises:
            ValidationError: If op is unknown or remove has no integer index
            IndexOutOfRangeError: If index is outside the array
            InvalidPathError: If array_path addresses something other than an array
            PageNotFoundError: If the page does not exist
            ConflictError: If expected_revision does not match
        """
        if op not in ARRAY_OPS:
            raise ValidationError('must be "add" or "remove"', "op")
        if op == "remove" and (isinstance(index, bool) or not isinstance(index, int)):
            raise ValidationError("an integer index is required for remove", "index")
        parse_path(array_path)

        relative_path, document = self._load(page_id)
        self._check_revision(page_id, document, expected_revision)

        node = resolve(document.tree, array_path)
        if node is not None and not isinstance(node, ArrayNode):
            if not (isinstance(node, Leaf) and node.value is None):
                raise InvalidPathError(array_path, "path does not address an array")
            node = None

        if op == "add":
            raw_item = copy.deepcopy(template if template is not None else self.default_template)
            try:
                item = from_data(raw_item)
            except ValidationError as e:
                raise ValidationError(e.original_message, "template")
            if node is None:
                node = ArrayNode()
                assign(document.tree, array_path, node)
            node.items.append(item)
            result = ArrayOpResult(
                op=op,
                array_path=array_path,
                index=len(node.items) - 1,
                item=to_data(item),
                new_length=len(node.items),
            )
        else:
            length = len(node.items) if node is not None else 0
            if index < 0 or index >= length:
                raise IndexOutOfRangeError(array_path, index, length)
            removed = node.items.pop(index)
            result = ArrayOpResult(
                op=op,
                array_path=array_path,
                index=index,
                item=to_data(removed),
                new_length=len(node.items),
            )

        self._save(relative_path, document)
        logger.info(f"{op} at {page_id}#{array_path}[{result.index}] (length {result.new_length})")
        return result
