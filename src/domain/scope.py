"""
Tenant identifiers and scope tokens.

The public identifier of a tenant is its slug; it travels in the
X-Tenant-ID header. The scope token (scope_id) is the physical isolation
key: built once from the slug when the tenant is created, stored in the
registry, and only ever read back from there. Header values are never
turned into scope tokens by string concatenation.
"""

import re
import secrets
from typing import Optional

from src.domain.errors import InvalidTenantIdentifier

DEFAULT_SCOPE_PREFIX = "db_"
MAX_SLUG_LENGTH = 63
SCOPE_BASE_LENGTH = 20

RESERVED_IDENTIFIERS = frozenset({"undefined", "null", "none", "nan", "true", "false"})

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_SCOPE_TAIL_RE = re.compile(r"^[a-z0-9]+(?:_[a-z0-9]+)*$")


def slugify(name: str) -> str:
    """Lowercase, keep [a-z0-9 -], turn whitespace into '-', trim '-'"""
    slug = name.lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def normalize_tenant_identifier(identifier: Optional[str]) -> str:
    """
    Validate a public tenant identifier taken from a request.

    Raises InvalidTenantIdentifier for missing, malformed or reserved
    values. No storage is touched.
    """
    if identifier is None or not isinstance(identifier, str):
        raise InvalidTenantIdentifier(identifier)

    candidate = identifier.strip().lower()
    if (
        not candidate
        or len(candidate) > MAX_SLUG_LENGTH
        or candidate in RESERVED_IDENTIFIERS
        or not _SLUG_RE.match(candidate)
    ):
        raise InvalidTenantIdentifier(identifier)
    return candidate


def generate_scope_id(slug: str, prefix: str = DEFAULT_SCOPE_PREFIX) -> str:
    """Build a new scope token: <prefix><slug base>_<8 hex chars>"""
    base = slug.replace("-", "_")[:SCOPE_BASE_LENGTH].strip("_")
    if not base:
        raise InvalidTenantIdentifier(slug)
    return f"{prefix}{base}_{secrets.token_hex(4)}"


def validate_scope_id(scope_id: Optional[str], prefix: str = DEFAULT_SCOPE_PREFIX) -> str:
    if not isinstance(scope_id, str) or not scope_id.startswith(prefix):
        raise InvalidTenantIdentifier(scope_id)

    tail = scope_id[len(prefix):]
    if (
        not tail
        or len(scope_id) > MAX_SLUG_LENGTH
        or tail in RESERVED_IDENTIFIERS
        or not _SCOPE_TAIL_RE.match(tail)
    ):
        raise InvalidTenantIdentifier(scope_id)
    return scope_id
