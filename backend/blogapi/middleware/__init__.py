# Middleware package init
"""
Blog API — Middleware Package
===============================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID first, so every later log line can carry it
    2. Logging wraps the handler to measure status and duration
    3. CORS answers browser preflight requests from the frontend
"""
