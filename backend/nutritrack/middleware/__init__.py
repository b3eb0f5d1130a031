# Middleware package init
"""
NutriTrack Backend — Middleware Package
========================================

Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

Request ID runs first so the access log line (written on the way back out)
carries the correlation id.
"""
