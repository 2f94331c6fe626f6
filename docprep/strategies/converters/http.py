"""Remote PDF converter.

Uploads the generated document to an HTTP conversion service and returns
the PDF it answers with. One attempt per document, no retries.
"""

import logging

import httpx

from docprep.interfaces.converter import BasePdfConverter
from docprep.interfaces.errors import ConversionServiceError

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class HttpPdfConverter(BasePdfConverter):
    """Converter backed by a multipart ``POST`` endpoint.

    Attributes:
        url: Conversion endpoint.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the converter.

        Args:
            url: Conversion endpoint accepting a ``file`` form field.
            timeout: Request timeout in seconds.
            transport: Optional transport, used by tests to stub the service.
        """
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def convert(self, document: bytes, file_name: str) -> bytes:
        """Send the document to the converter and return the PDF bytes.

        Raises:
            ConversionServiceError: On a transport error or a non-success
                response.
        """
        logger.info(f"Requesting PDF conversion of {file_name} ({len(document)} bytes)")
        files = {"file": (file_name, document, DOCX_MEDIA_TYPE)}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, files=files)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ConversionServiceError(
                f"PDF converter answered {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ConversionServiceError(f"PDF converter unreachable: {e}") from e

        logger.info(f"PDF conversion finished: {len(response.content)} bytes")
        return response.content
