"""Protocol layer: JSON-RPC envelopes, value formatters, exp descriptors."""

from .jsonrpc import RequestEnvelope, ResponseEnvelope, build_request, parse_response, to_payload
