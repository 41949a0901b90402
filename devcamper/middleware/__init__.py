"""
DevCamper API — Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters):
    Request → [Rate Limit] → [Request ID] → [Access Log] → [GZip] → [CORS] → Route

    1. Rate Limit first: reject abusive clients before any other work
    2. Request ID: correlation id for every log line of the request
    3. Access Log: method, path, status and duration, tagged with the id

    Responses pass back through the chain in reverse, which is how the
    request id ends up in the response headers and the access log sees the
    final status code.
"""
