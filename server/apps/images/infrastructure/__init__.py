"""Infrastructure layer for images app.

This package contains integrations with external systems:
- Multipart intake with an in-memory size cap
- Storage key generation
- Storage gateways (ImageKit, S3-compatible)

Keep infrastructure concerns separate from business logic.
"""
