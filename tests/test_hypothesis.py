"""
Property-based tests using Hypothesis.

Covers slug generation, team and issue identifiers, pagination arithmetic
and password hashing.
"""
import re

from hypothesis import given, settings, strategies as st

from issuetrack.api.auth import get_password_hash, verify_password
from issuetrack.services.issue_query import MAX_PAGE_SIZE, Pagination, has_more
from issuetrack.utils.identifier import (
    format_issue_identifier,
    is_valid_team_identifier,
    parse_issue_identifier,
)
from issuetrack.utils.slug import DEFAULT_SLUG, generate_slug, generate_unique_slug


# =============================================================================
# Custom Strategies
# =============================================================================


team_identifiers = st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ", min_size=2, max_size=5)

slugs = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789", min_size=1, max_size=20)


# =============================================================================
# Slugs
# =============================================================================


@given(st.text(max_size=100))
def test_slug_is_url_safe(name):
    slug = generate_slug(name)

    assert re.fullmatch(r"[a-z0-9]+(-[a-z0-9]+)*", slug)


@given(st.text(max_size=100))
def test_slug_is_idempotent(name):
    slug = generate_slug(name)

    assert generate_slug(slug) == slug


@given(st.text(alphabet=" !@#$%^&*()_+-=", max_size=20))
def test_slug_falls_back_when_nothing_usable(name):
    assert generate_slug(name) == DEFAULT_SLUG


@given(slugs, st.sets(st.integers(min_value=2, max_value=30)), st.booleans())
def test_unique_slug_is_never_taken(base, suffixes, base_taken):
    taken = {f"{base}-{n}" for n in suffixes}
    if base_taken:
        taken.add(base)

    slug = generate_unique_slug(base, taken)

    assert slug not in taken
    assert slug == base or slug.startswith(f"{base}-")


def test_unique_slug_examples():
    assert generate_unique_slug("acme", set()) == "acme"
    assert generate_unique_slug("acme", {"acme"}) == "acme-2"
    assert generate_unique_slug("acme", {"acme", "acme-2", "acme-4"}) == "acme-3"


# =============================================================================
# Identifiers
# =============================================================================


@given(team_identifiers)
def test_valid_team_identifiers(identifier):
    assert is_valid_team_identifier(identifier)


@given(st.text(max_size=8))
def test_team_identifier_pattern(identifier):
    expected = re.fullmatch(r"[A-Z]{2,5}", identifier) is not None

    assert is_valid_team_identifier(identifier) == expected


@given(team_identifiers, st.integers(min_value=1, max_value=10**9))
def test_issue_identifier_round_trip(team, number):
    identifier = format_issue_identifier(team, number)

    assert parse_issue_identifier(identifier) == (team, number)


def test_malformed_issue_identifiers():
    for identifier in ("ENG", "ENG-", "ENG-0", "ENG-01", "eng-1", "E-1", "ENGINE-1", "ENG-1\n"):
        assert parse_issue_identifier(identifier) is None


# =============================================================================
# Pagination
# =============================================================================


@given(
    st.integers(min_value=1, max_value=1000),
    st.integers(min_value=1, max_value=MAX_PAGE_SIZE),
    st.integers(min_value=0, max_value=10_000),
)
def test_has_more_matches_page_arithmetic(page, page_size, total):
    pagination = Pagination(page=page, page_size=page_size)
    returned = max(0, min(page_size, total - pagination.offset))

    assert has_more(pagination.offset, returned, total) == (page * page_size < total)


# =============================================================================
# Passwords
# =============================================================================


@settings(max_examples=5, deadline=None)
@given(st.text(alphabet=st.characters(min_codepoint=33, max_codepoint=126), min_size=8, max_size=71))
def test_password_hash_verifies(password):
    hashed = get_password_hash(password)

    assert verify_password(password, hashed)
    assert not verify_password(password + "x", hashed)
