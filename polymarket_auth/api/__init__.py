"""HTTP transport for the CLOB API."""

from .transport import RequestsTransport, Transport, TransportResponse, decode_response

__all__ = ["RequestsTransport", "Transport", "TransportResponse", "decode_response"]
