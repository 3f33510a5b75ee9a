"""Salesforce Metadata API Client (SOAP over httpx)."""

import asyncio
import base64
from dataclasses import dataclass
from typing import Any
from xml.etree import ElementTree
from xml.sax.saxutils import escape

import httpx
import pybreaker

from core import get_logger
from core.errors import DeployAuthError, DeploySubmissionError
from deploy.results import DeployResult, as_bool

logger = get_logger(__name__)

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
PARTNER_NS = "urn:partner.soap.sforce.com"
METADATA_NS = "http://soap.sforce.com/2006/04/metadata"


class _BreakerListener(pybreaker.CircuitBreakerListener):
    """Logs circuit breaker state changes."""

    def state_change(self, cb, old_state, new_state):
        logger.warning(
            "breaker_state_change",
            breaker=cb.name,
            from_state=str(old_state),
            to_state=str(new_state),
        )


# Shared across clients: every deploy request builds its own client, but the
# breaker guards the remote endpoint as a whole. Only transport errors count.
metadata_breaker = pybreaker.CircuitBreaker(
    fail_max=5,
    reset_timeout=60,
    name="salesforce-metadata",
    listeners=[_BreakerListener()],
)


class SoapFault(Exception):
    """The endpoint answered with a SOAP fault."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


@dataclass
class Session:
    """Authenticated Metadata API session."""

    session_id: str
    metadata_url: str
    user_id: str = ""


def _envelope(body: str, header: str = "") -> str:
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        f'<env:Envelope xmlns:env="{SOAP_ENV_NS}" '
        'xmlns:xsd="http://www.w3.org/2001/XMLSchema" '
        'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
        f"{f'<env:Header>{header}</env:Header>' if header else ''}"
        f"<env:Body>{body}</env:Body>"
        "</env:Envelope>"
    )


def element_to_dict(element: ElementTree.Element) -> dict[str, Any]:
    """
    Flatten a SOAP result element, dropping namespaces.

    Leaf children become strings; repeated tags become lists.
    """
    result: dict[str, Any] = {}
    for child in element:
        key = child.tag.rsplit("}", 1)[-1]
        value: Any = element_to_dict(child) if len(child) else (child.text or "")
        if key in result:
            existing = result[key]
            if not isinstance(existing, list):
                result[key] = [existing]
            result[key].append(value)
        else:
            result[key] = value
    return result


def parse_soap_result(text: str) -> dict[str, Any]:
    """
    Extract the ``result`` element of a SOAP response.

    Raises:
        SoapFault: The body carries a fault, or no result is present
    """
    try:
        root = ElementTree.fromstring(text)
    except ElementTree.ParseError as e:
        raise SoapFault("parse_error", f"Unreadable SOAP response: {e}") from e

    fault = root.find(".//{*}Fault")
    if fault is not None:
        code = fault.findtext("{*}faultcode") or "fault"
        message = fault.findtext("{*}faultstring") or "SOAP fault"
        raise SoapFault(code, message)

    result = root.find(".//{*}result")
    if result is None:
        raise SoapFault("no_result", "SOAP response did not include a result")
    return element_to_dict(result)


def deploy_result_from_dict(data: dict[str, Any]) -> DeployResult:
    details = data.get("details")
    details = details if isinstance(details, dict) else {}
    return DeployResult(
        id=str(data.get("id", "")),
        done=as_bool(data.get("done", False)),
        success=as_bool(data.get("success", False)),
        status=str(data.get("status") or data.get("state") or ""),
        completed_date=data.get("completedDate") or None,
        error_message=data.get("errorMessage") or None,
        component_successes=details.get("componentSuccesses"),
        component_failures=details.get("componentFailures"),
    )


class MetadataClient:
    """
    Client for the Salesforce Metadata API deploy calls.

    One login per client; deploy and status checks reuse the session.
    """

    def __init__(self, login_url: str, api_version: str, timeout: float = 30.0) -> None:
        self.login_url = login_url.rstrip("/")
        self.api_version = api_version
        self._client = httpx.Client(timeout=timeout)
        self.session: Session | None = None

    def _post(self, url: str, action: str, envelope: str) -> httpx.Response:
        def _make_request() -> httpx.Response:
            return self._client.post(
                url,
                content=envelope.encode("utf-8"),
                headers={"Content-Type": "text/xml; charset=UTF-8", "SOAPAction": action},
            )

        return metadata_breaker.call(_make_request)

    def _call(self, url: str, action: str, envelope: str) -> dict[str, Any]:
        response = self._post(url, action, envelope)
        logger.debug("soap_call", action=action, status=response.status_code)
        return parse_soap_result(response.text)

    def login(self, username: str, password: str) -> Session:
        """
        Log in with username and password (security token appended if required).

        Raises:
            DeployAuthError: Login rejected or endpoint unreachable
        """
        url = f"{self.login_url}/services/Soap/u/{self.api_version}"
        body = (
            f'<n1:login xmlns:n1="{PARTNER_NS}">'
            f"<n1:username>{escape(username)}</n1:username>"
            f"<n1:password>{escape(password)}</n1:password>"
            "</n1:login>"
        )
        try:
            data = self._call(url, "login", _envelope(body))
        except SoapFault as e:
            logger.warning("login_rejected", code=e.code)
            raise DeployAuthError(f"Salesforce login failed: {e.message}") from e
        except pybreaker.CircuitBreakerError as e:
            raise DeployAuthError("Salesforce is unavailable (circuit open)") from e
        except httpx.HTTPError as e:
            logger.warning("login_http_error", error=str(e))
            raise DeployAuthError(f"Salesforce login failed: {e}") from e

        session_id = data.get("sessionId")
        metadata_url = data.get("metadataServerUrl")
        if not session_id or not metadata_url:
            raise DeployAuthError("Salesforce login response was missing session details")

        self.session = Session(
            session_id=session_id, metadata_url=metadata_url, user_id=data.get("userId", "")
        )
        logger.info("login_success", user_id=self.session.user_id)
        return self.session

    def _metadata_call(self, action: str, body: str) -> dict[str, Any]:
        if self.session is None:
            raise DeploySubmissionError("Not logged in to Salesforce")
        header = (
            f'<met:SessionHeader xmlns:met="{METADATA_NS}">'
            f"<met:sessionId>{escape(self.session.session_id)}</met:sessionId>"
            "</met:SessionHeader>"
        )
        try:
            return self._call(self.session.metadata_url, action, _envelope(body, header))
        except SoapFault as e:
            raise DeploySubmissionError(f"Salesforce {action} failed: {e.message}") from e
        except pybreaker.CircuitBreakerError as e:
            raise DeploySubmissionError("Salesforce is unavailable (circuit open)") from e
        except httpx.HTTPError as e:
            logger.warning("metadata_http_error", action=action, error=str(e))
            raise DeploySubmissionError(f"Salesforce {action} failed: {e}") from e

    def deploy(self, archive: bytes, single_package: bool = True) -> str:
        """
        Start a deploy; returns the async job id.

        Raises:
            DeploySubmissionError: The deploy call failed
        """
        zip_file = base64.b64encode(archive).decode("ascii")
        body = (
            f'<met:deploy xmlns:met="{METADATA_NS}">'
            f"<met:ZipFile>{zip_file}</met:ZipFile>"
            "<met:DeployOptions>"
            f"<met:singlePackage>{'true' if single_package else 'false'}</met:singlePackage>"
            "<met:rollbackOnError>true</met:rollbackOnError>"
            "</met:DeployOptions>"
            "</met:deploy>"
        )
        data = self._metadata_call("deploy", body)
        job_id = str(data.get("id", ""))
        logger.info("deploy_started", job_id=job_id, state=data.get("state"))
        return job_id

    def check_deploy_status(self, job_id: str) -> DeployResult:
        """Current state of a deploy job, with component details."""
        body = (
            f'<met:checkDeployStatus xmlns:met="{METADATA_NS}">'
            f"<met:asyncProcessId>{escape(job_id)}</met:asyncProcessId>"
            "<met:includeDetails>true</met:includeDetails>"
            "</met:checkDeployStatus>"
        )
        return deploy_result_from_dict(self._metadata_call("checkDeployStatus", body))

    def close(self) -> None:
        """Close HTTP client"""
        self._client.close()

    def __enter__(self) -> "MetadataClient":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class MetadataDeployService:
    """Async submit/poll view of a logged-in MetadataClient."""

    def __init__(self, client: MetadataClient) -> None:
        self.client = client

    async def submit(self, archive: bytes) -> str:
        return await asyncio.to_thread(self.client.deploy, archive)

    async def poll(self, job_id: str) -> DeployResult:
        return await asyncio.to_thread(self.client.check_deploy_status, job_id)
