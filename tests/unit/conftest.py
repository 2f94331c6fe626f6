"""Shared fixtures: in-memory Word packages and paragraph builders."""

import io
import zipfile

import pytest
from lxml import etree

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
W = f"{{{W_NS}}}"

CONTENT_TYPES = b"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
<Default Extension="xml" ContentType="application/xml"/>
<Default Extension="png" ContentType="image/png"/>
<Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
</Types>"""

PACKAGE_RELS = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
<Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="{target}"/>
</Relationships>"""

# Not a real image; only the bytes matter.
MEDIA_BYTES = bytes(range(256)) * 4


def _document_xml(body: str) -> bytes:
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:document xmlns:w="{W_NS}"><w:body>{body}</w:body></w:document>'
    ).encode("utf-8")


@pytest.fixture
def make_docx():
    """Build a minimal ``.docx`` whose body is the given WordprocessingML."""

    def _make(body: str, main_part: str = "word/document.xml", with_media: bool = True) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            zf.writestr("[Content_Types].xml", CONTENT_TYPES)
            zf.writestr("_rels/.rels", PACKAGE_RELS.format(target=main_part))
            zf.writestr(main_part, _document_xml(body))
            if with_media:
                zf.writestr("word/media/image1.png", MEDIA_BYTES)
        return buffer.getvalue()

    return _make


@pytest.fixture
def make_paragraph():
    """Parse the inner XML of a ``w:p`` into an element."""

    def _make(inner: str) -> etree._Element:
        return etree.fromstring(f'<w:p xmlns:w="{W_NS}">{inner}</w:p>'.encode("utf-8"))

    return _make


@pytest.fixture
def read_main_part():
    """Return the parsed main part of a ``.docx``."""

    def _read(data: bytes, main_part: str = "word/document.xml") -> etree._Element:
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            return etree.fromstring(zf.read(main_part))

    return _read


@pytest.fixture
def paragraph_texts(read_main_part):
    """Return the visible text of every paragraph of a ``.docx``."""

    def _texts(data: bytes, main_part: str = "word/document.xml") -> list[str]:
        root = read_main_part(data, main_part)
        return ["".join(t.text or "" for t in p.iter(f"{W}t")) for p in root.iter(f"{W}p")]

    return _texts


@pytest.fixture
def media_bytes() -> bytes:
    """Contents of the media entry written by make_docx."""
    return MEDIA_BYTES
