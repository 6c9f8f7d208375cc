"""
Remote validator: delegates to a FHIR server's $validate operation.

POST {base_url}/{resourceType}/$validate with the resource as body; the server
answers with an OperationOutcome whose issues become our Issues. Useful when
full terminology/profile validation lives in a dedicated validator service.

Single attempt per document, no retry loop: a transport failure is a
ValidatorFault and the document is routed to the invalid sink.
"""

from typing import Any, Optional

import httpx
import structlog

from fhir_gate.exceptions import ValidatorFault
from fhir_gate.models.document import ParsedResource
from fhir_gate.models.enums import Severity
from fhir_gate.models.outcome_models import Issue
from fhir_gate.validators.base import BaseValidator

logger = structlog.get_logger(__name__)

FHIR_JSON = "application/fhir+json"


class RemoteValidator(BaseValidator):
    """
    FHIR $validate client using a persistent httpx.Client.

    Status handling:
    - Any response whose body is an OperationOutcome is a set of findings
      (servers commonly answer 200, 400 or 422 for invalid resources)
    - Anything else (5xx page, HTML, non-JSON, network error, timeout) is a ValidatorFault
    """

    name = "remote"

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize remote validator.

        Args:
            base_url: FHIR server base URL (e.g. http://fhir-validator:8080/fhir)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests inject httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None

        logger.info("Remote validator initialized", base_url=self.base_url, timeout=timeout)

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": FHIR_JSON, "Content-Type": FHIR_JSON},
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    def describe(self) -> dict[str, Any]:
        return {"validator": self.name, "base_url": self.base_url, "timeout": self.timeout}

    def validate(self, resource: ParsedResource) -> list[Issue]:
        path = f"/{resource.resource_type}/$validate"

        try:
            response = self._get_client().post(path, json=resource.data)
        except httpx.TimeoutException as e:
            raise ValidatorFault(
                f"validator request timed out after {self.timeout}s",
                validator=self.name,
                cause=type(e).__name__,
            ) from e
        except httpx.HTTPError as e:
            raise ValidatorFault(
                f"validator request failed: {e}",
                validator=self.name,
                cause=type(e).__name__,
            ) from e

        try:
            body = response.json()
        except ValueError as e:
            raise ValidatorFault(
                f"validator returned non-JSON response (HTTP {response.status_code})",
                validator=self.name,
                cause=type(e).__name__,
            ) from e

        if not isinstance(body, dict) or body.get("resourceType") != "OperationOutcome":
            raise ValidatorFault(
                f"validator returned no OperationOutcome (HTTP {response.status_code})",
                validator=self.name,
            )

        issues = [self._to_issue(raw, resource.resource_type) for raw in body.get("issue") or []]
        logger.debug(
            "Remote validation finished",
            resource_type=resource.resource_type,
            status_code=response.status_code,
            issue_count=len(issues),
        )
        return issues

    def _to_issue(self, raw: dict, resource_type: str) -> Issue:
        """Map one OperationOutcome.issue entry to an Issue."""
        try:
            severity = Severity.from_code(raw.get("severity", ""))
        except (ValueError, AttributeError) as e:
            raise ValidatorFault(
                f"validator returned unknown issue severity {raw.get('severity')!r}",
                validator=self.name,
                cause=type(e).__name__,
            ) from e

        location = resource_type
        for paths in (raw.get("expression"), raw.get("location")):
            # Both are arrays of strings in OperationOutcome
            if isinstance(paths, list) and paths and isinstance(paths[0], str) and paths[0]:
                location = paths[0]
                break

        message = raw.get("diagnostics") or (raw.get("details") or {}).get("text") or raw.get("code", "")
        return Issue(severity=severity, location=location, message=message)

    def close(self) -> None:
        """Close the HTTP client connection."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
            logger.debug("Closed remote validator connection")
