# Middleware package init
"""
Form Intake Service — Middleware Package
=========================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so every access log line carries the ID.
"""
