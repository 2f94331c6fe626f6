"""Word package reading and rewriting.

Only the main document part is parsed; every other entry of the zip
container is carried through byte-for-byte.
"""

import io
import logging
import posixpath
import zipfile
import zlib
from dataclasses import dataclass

from lxml import etree

from docprep.interfaces.errors import InputFormatError, MissingRequiredPartError

logger = logging.getLogger(__name__)

DEFAULT_MAIN_PART = "word/document.xml"
PACKAGE_RELS = "_rels/.rels"
OFFICE_DOCUMENT_REL = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument"
)
RELS_NS = "http://schemas.openxmlformats.org/package/2006/relationships"

_parser = etree.XMLParser(resolve_entities=False, huge_tree=True)


def parse_part(data: bytes) -> etree._Element:
    """Parse an XML part, raising InputFormatError on malformed markup."""
    try:
        return etree.fromstring(data, parser=_parser)
    except etree.XMLSyntaxError as e:
        raise InputFormatError(f"Malformed document markup: {e}") from e


def serialize_part(root: etree._Element) -> bytes:
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8", standalone=True)


def _main_part_name(archive: zipfile.ZipFile) -> str:
    """Resolve the main document part from the package relationships."""
    names = set(archive.namelist())
    if PACKAGE_RELS in names:
        rels = parse_part(archive.read(PACKAGE_RELS))
        for rel in rels.iter(f"{{{RELS_NS}}}Relationship"):
            if rel.get("Type") == OFFICE_DOCUMENT_REL:
                target = posixpath.normpath(rel.get("Target", "").lstrip("/"))
                if target in names:
                    return target
                logger.warning(f"Main part target '{target}' is not in the package")
    return DEFAULT_MAIN_PART


@dataclass
class DocumentPackage:
    """An opened Word package.

    Attributes:
        entries: Original zip entries in archive order.
        contents: Raw bytes of every entry, keyed by name.
        main_part: Name of the main document part.
        root: Parsed main document part; mutate it before calling write().
    """

    entries: list[zipfile.ZipInfo]
    contents: dict[str, bytes]
    main_part: str
    root: etree._Element

    def write(self) -> bytes:
        """Serialize the package with the current main part.

        Returns:
            The new container as bytes. All other entries keep their
            original bytes, order and compression.
        """
        main_xml = serialize_part(self.root)
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as out:
            for info in self.entries:
                data = main_xml if info.filename == self.main_part else self.contents[info.filename]
                out.writestr(info, data)
        return buffer.getvalue()


def read_package(data: bytes) -> DocumentPackage:
    """Open a Word package held in memory.

    Args:
        data: The ``.docx`` file contents.

    Returns:
        DocumentPackage with the main part parsed.

    Raises:
        InputFormatError: If ``data`` is not a zip container or the main part
            is not well-formed XML.
        MissingRequiredPartError: If there is no main document part.
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as e:
        raise InputFormatError(f"Not a Word package: {e}") from e

    with archive:
        main_part = _main_part_name(archive)
        if main_part not in archive.namelist():
            raise MissingRequiredPartError(f"Package has no main document part ({main_part})")

        entries = archive.infolist()
        try:
            contents = {info.filename: archive.read(info.filename) for info in entries}
        except (zipfile.BadZipFile, zlib.error) as e:
            raise InputFormatError(f"Corrupted package entry: {e}") from e

    logger.debug(f"Opened package: {len(entries)} entries, main part {main_part}")
    return DocumentPackage(
        entries=entries,
        contents=contents,
        main_part=main_part,
        root=parse_part(contents[main_part]),
    )
