"""
Single request/response exchange for a named protocol step.

Normalizes transport failures and unexpected status codes into
NetworkError carrying the step, status and a truncated body.
"""
from typing import Dict, Optional, Tuple, Union

from .protocols import HttpTransport, HttpResponse, MultipartForm
from ..exceptions import NetworkError, Step, TransportError
from ..logging import get_logger

logger = get_logger('cwupload.transport')

SUCCESS_STATUSES: Tuple[int, int] = (200, 299)


async def exchange(
    transport: HttpTransport,
    step: Step,
    method: str,
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    data: Optional[Union[str, bytes]] = None,
    form: Optional[MultipartForm] = None,
    allow_redirects: bool = True,
    accept: Tuple[int, int] = SUCCESS_STATUSES
) -> HttpResponse:
    """
    Send one request and check its status.

    Args:
        transport: HTTP transport
        step: Protocol step, reported on failure
        method: HTTP method
        url: Absolute URL
        headers: Request headers
        data: Raw body
        form: Multipart body
        allow_redirects: Whether redirects are followed
        accept: Inclusive (low, high) range of accepted status codes

    Returns:
        The response

    Raises:
        NetworkError: On transport failure or a status outside `accept`
    """
    try:
        response = await transport.request(
            method,
            url,
            headers=headers,
            data=data,
            form=form,
            allow_redirects=allow_redirects
        )
    except TransportError as e:
        raise NetworkError(str(e), step=step) from e

    low, high = accept
    if not low <= response.status <= high:
        logger.error(f"{step.value}: {method} {url} returned status {response.status}")
        raise NetworkError(
            f"Unexpected response from {method} {url}",
            step=step,
            status=response.status,
            body=response.text
        )

    return response
