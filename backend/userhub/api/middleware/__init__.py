"""
UserHub Backend — Middleware Package
======================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    The request ID is set before the logging middleware reads it, and the
    logging middleware sees the final status code on the way out.
"""
