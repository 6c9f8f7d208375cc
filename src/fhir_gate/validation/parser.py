"""
Resource parsing: raw document bytes -> ParsedResource.

Hard-fail step: anything that is not a JSON object carrying a resourceType
discriminator raises ParseError and the document is routed to the invalid sink.
"""

import codecs
import json

from fhir_gate.exceptions import ParseError
from fhir_gate.models.document import ParsedResource

MISSING_RESOURCE_TYPE = "missing resource type"


class ResourceParser:
    """
    Parse FHIR JSON documents.

    Raises ParseError on empty, undecodable or malformed content and when the
    resourceType discriminator is absent.
    """

    def parse(self, content: bytes) -> ParsedResource:
        """
        Parse raw content into a typed resource.

        Args:
            content: Raw bytes as read from the source

        Returns:
            ParsedResource with resource_type and the full JSON object

        Raises:
            ParseError: If content is not a JSON object with a resourceType
        """
        text = self._decode(content)

        if not text.strip():
            raise ParseError("document content is empty", parse_error="Empty content")

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(
                f"malformed JSON: {e.msg} at line {e.lineno} col {e.colno}",
                raw_content=text,
                parse_error=f"{e.msg} at line {e.lineno} col {e.colno}",
            ) from e

        if not isinstance(parsed, dict):
            raise ParseError(
                f"document is not a JSON object (got {type(parsed).__name__})",
                raw_content=text,
                parse_error=f"Expected object, got {type(parsed).__name__}",
            )

        resource_type = parsed.get("resourceType")
        if not isinstance(resource_type, str) or not resource_type.strip():
            raise ParseError(MISSING_RESOURCE_TYPE, raw_content=text)

        return ParsedResource(resource_type=resource_type.strip(), data=parsed)

    @staticmethod
    def _decode(content: bytes) -> str:
        if content.startswith(codecs.BOM_UTF8):
            content = content[len(codecs.BOM_UTF8):]
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(
                f"document is not valid UTF-8: {e.reason} at byte {e.start}",
                parse_error=str(e),
            ) from e
