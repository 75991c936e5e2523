"""Backend selection."""

import logging
from typing import Dict, Optional, Type, Union

import requests

from ..constants import DEFAULT_TIMEOUT_SECONDS
from ..models import BackendKind
from .base import BuildServerBackend
from .paper import PaperBackend
from .purpur import PurpurBackend

BACKENDS: Dict[BackendKind, Type[BuildServerBackend]] = {
    backend_class.kind: backend_class for backend_class in (PaperBackend, PurpurBackend)
}


def get_backend(
    kind: Union[BackendKind, str],
    base_url: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    session: Optional[requests.Session] = None,
    log: Optional[logging.Logger] = None,
) -> BuildServerBackend:
    """
    Create the backend client for a build server.

    Args:
        kind: BackendKind or its name ("paper", "purpur")
        base_url: Override for the API base URL
        timeout: Request timeout in seconds
        session: Optional pre-built requests session
        log: Logger injected into the backend

    Raises:
        ConfigurationError: If the backend name is unknown
    """
    if not isinstance(kind, BackendKind):
        kind = BackendKind.from_name(kind)

    backend_class = BACKENDS[kind]
    if base_url:
        return backend_class(base_url=base_url, timeout=timeout, session=session, log=log)
    return backend_class(timeout=timeout, session=session, log=log)
