"""
Process-wide configuration shared by every HTTPClient.

Holds the bearer token, additional trusted root certificates and the global
timeout. A change made here is visible to every existing client and every
request submitted after the change. There is no per-request override and no
rollback other than an explicit :meth:`GlobalConfig.reset`.

Example:
    >>> from duplex_http import HTTPClient, set_bearer_token, set_root_ca
    >>>
    >>> set_root_ca("/etc/ssl/private-ca.pem")
    >>> set_bearer_token("eyJhbGciOi...")
    >>>
    >>> # Both clients share the same token and trust store
    >>> users = HTTPClient()
    >>> orders = HTTPClient()
    >>>
    >>> # Or pass an isolated config explicitly
    >>> config = GlobalConfig()
    >>> client = HTTPClient(global_config=config)
"""

import logging
import ssl
import threading
from pathlib import Path
from typing import List, Optional, Tuple, Union

import certifi

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_PEM_MARKER = b"-----BEGIN"


def _load_certificate(context: ssl.SSLContext, data: bytes) -> None:
    """Load PEM or DER certificate bytes into context."""
    if data.lstrip().startswith(_PEM_MARKER):
        context.load_verify_locations(cadata=data.decode("ascii"))
    else:
        context.load_verify_locations(cadata=data)


class GlobalConfig:
    """
    Shared, mutable configuration with process-wide scope.

    Construct once and update in place. Thread-safe: callers and the
    transport loop thread read it concurrently.

    Attributes:
        bearer_token: Current token ("" when absent)
        root_certificates: Added root certificates, in insertion order
        timeout: Global request timeout in seconds (None = no timeout)
        trust_version: Incremented on every trust store change
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._token = ""
        self._root_certificates: List[bytes] = []
        self._timeout: Optional[float] = None
        self._trust_version = 0

    # ==================== Bearer token ====================

    @property
    def bearer_token(self) -> str:
        with self._lock:
            return self._token

    def set_bearer_token(self, token: Optional[str]) -> None:
        """
        Set the bearer token used by all clients.

        Args:
            token: JWT or opaque token. Empty string or None clears it.
        """
        with self._lock:
            self._token = token or ""
        logger.debug("Bearer token %s", "set" if token else "cleared")

    def clear_bearer_token(self) -> None:
        """Remove the bearer token; next requests carry no Authorization."""
        self.set_bearer_token("")

    # ==================== Trust store ====================

    @property
    def root_certificates(self) -> Tuple[bytes, ...]:
        with self._lock:
            return tuple(self._root_certificates)

    @property
    def trust_version(self) -> int:
        with self._lock:
            return self._trust_version

    def add_root_certificate(self, data: Union[bytes, str]) -> None:
        """
        Append a root certificate to the trust store.

        Effective for all TLS connections opened after this call.

        Args:
            data: Certificate in PEM (bytes or str) or DER (bytes) form

        Raises:
            ConfigurationError: Certificate data cannot be parsed
        """
        if isinstance(data, str):
            data = data.encode("utf-8")

        if not data.strip():
            raise ConfigurationError("Root certificate is empty")

        # Validate now so a bad certificate fails at the call site
        scratch = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        try:
            _load_certificate(scratch, data)
        except (ssl.SSLError, ValueError) as e:
            raise ConfigurationError(f"Invalid root certificate: {e}") from e

        with self._lock:
            self._root_certificates.append(bytes(data))
            self._trust_version += 1
            count = len(self._root_certificates)

        logger.info("Root certificate added (total: %d)", count)

    def load_root_certificate(self, cert_path: Union[str, Path]) -> None:
        """
        Read a certificate file and append it to the trust store.

        Args:
            cert_path: Path to PEM or DER encoded certificate

        Raises:
            ConfigurationError: File cannot be read or is not a certificate
        """
        path = Path(cert_path)
        try:
            data = path.read_bytes()
        except OSError as e:
            logger.error("Unable to load root certificate %s: %s", path, e)
            raise ConfigurationError(
                f"Unable to load root certificate: {e.strerror or e}",
                path=str(path),
            ) from e

        try:
            self.add_root_certificate(data)
        except ConfigurationError as e:
            e.path = str(path)
            raise

    def create_ssl_context(self) -> ssl.SSLContext:
        """
        Build an SSL context: default trust (certifi) plus added roots.

        Returns:
            New ssl.SSLContext for client connections
        """
        context = ssl.create_default_context(cafile=certifi.where())
        for data in self.root_certificates:
            _load_certificate(context, data)
        return context

    # ==================== Timeout ====================

    @property
    def timeout(self) -> Optional[float]:
        with self._lock:
            return self._timeout

    def set_timeout(self, seconds: float) -> None:
        """
        Set the global timeout applied to every request.

        Args:
            seconds: Timeout in seconds (must be positive)
        """
        if seconds <= 0:
            raise ValueError("timeout must be positive")
        with self._lock:
            self._timeout = float(seconds)

    def reset_timeout(self) -> None:
        """Remove the global timeout (requests wait indefinitely)."""
        with self._lock:
            self._timeout = None

    # ==================== Lifecycle ====================

    def reset(self) -> None:
        """Drop token, added certificates and timeout."""
        with self._lock:
            self._token = ""
            if self._root_certificates:
                self._root_certificates.clear()
                self._trust_version += 1
            self._timeout = None

    def __repr__(self) -> str:
        return (
            f"GlobalConfig(bearer_token={'set' if self.bearer_token else 'unset'}, "
            f"root_certificates={len(self.root_certificates)}, timeout={self.timeout})"
        )


# Global instance (singleton pattern)
_default_config = GlobalConfig()


def get_global_config() -> GlobalConfig:
    """Return the process-wide GlobalConfig used when none is passed."""
    return _default_config


def set_bearer_token(token: Optional[str]) -> None:
    """Set (or clear with "" / None) the process-wide bearer token."""
    _default_config.set_bearer_token(token)


def set_root_ca(cert_path: Union[str, Path]) -> None:
    """Append the certificate at cert_path to the process-wide trust store."""
    _default_config.load_root_certificate(cert_path)


def set_global_timeout(seconds: float) -> None:
    """Set the process-wide request timeout."""
    _default_config.set_timeout(seconds)


def reset_global_timeout() -> None:
    """Remove the process-wide request timeout."""
    _default_config.reset_timeout()
