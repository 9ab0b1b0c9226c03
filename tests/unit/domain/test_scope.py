"""
Unit tests for tenant identifiers and scope tokens
"""

import re

import pytest

from src.domain.errors import InvalidTenantIdentifier
from src.domain.scope import (
    generate_scope_id,
    normalize_tenant_identifier,
    slugify,
    validate_scope_id,
)


def test_slugify_collapses_whitespace_and_strips_symbols():
    assert slugify("  Acme  Shop!! ") == "acme-shop"
    assert slugify("GPU -- Store") == "gpu-store"
    assert slugify("Café & Co") == "caf-co"


def test_normalize_accepts_and_lowercases_slug():
    assert normalize_tenant_identifier("  Acme-Shop ") == "acme-shop"


@pytest.mark.parametrize(
    "identifier",
    [None, "", "   ", "undefined", "NULL", "None", "nan", "true", "false", "acme_shop", "-acme", "a" * 64, "acme shop"],
)
def test_normalize_rejects_invalid_identifiers(identifier):
    with pytest.raises(InvalidTenantIdentifier):
        normalize_tenant_identifier(identifier)


def test_generate_scope_id_applies_prefix_once():
    scope_id = generate_scope_id("acme-shop")

    assert re.match(r"^db_acme_shop_[0-9a-f]{8}$", scope_id)
    assert not scope_id.startswith("db_db_")


def test_generate_scope_id_truncates_long_slugs():
    scope_id = generate_scope_id("a-very-long-shop-name-that-keeps-going", prefix="shop_")

    assert scope_id.startswith("shop_a_very_long_shop_nam_")
    assert len(scope_id) == len("shop_") + 20 + 1 + 8


def test_generated_scope_ids_are_unique():
    assert generate_scope_id("acme") != generate_scope_id("acme")


def test_validate_scope_id():
    assert validate_scope_id("db_acme_1a2b3c4d") == "db_acme_1a2b3c4d"

    for bad in [None, "acme_1a2b", "db_", "db_undefined", "db_Acme", "db_acme-shop", "db_../x"]:
        with pytest.raises(InvalidTenantIdentifier):
            validate_scope_id(bad)
