"""Defaults for upload ingestion, staging and TTL handling."""

from __future__ import annotations

import tempfile
from pathlib import Path

# Form field names accepted by POST /upload
FILE_FIELD = "file"
IDENTIFIER_FIELD = "identifier"
TTL_VALUE_FIELD = "ttl_value"
TTL_UNIT_FIELD = "ttl_unit"
PASSWORD_FIELD = "password"

# Used when a file part carries no usable filename
PLACEHOLDER_FILENAME = "unnamed"

DEFAULT_TTL_VALUE = 1
DEFAULT_TTL_UNIT = "hours"

# Presigned link lifetime for objects published without a TTL
DEFAULT_LINK_EXPIRY_SECONDS = 3600

DEFAULT_TEMP_DIR = Path(tempfile.gettempdir()) / "s3-ttl-uploader"

# 1 GiB request body, 64 KiB per text field
DEFAULT_MAX_BODY_SIZE = 1024 * 1024 * 1024
DEFAULT_MAX_FIELD_SIZE = 64 * 1024

DEFAULT_PORT = 8080
