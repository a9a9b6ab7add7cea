"""Business logic layer for images app.

This package contains the upload and delete flows:
- Validate the inbound file or file ID
- Name the file and hand it to the storage gateway
- Translate provider failures into gateway errors

All business logic should be implemented here, separate from
views (HTTP layer) and infrastructure (external systems).
"""
