"""
Unit tests for API version parsing and resolution.
"""

import pytest

from service_gateway.app.versioning.models import ApiVersion, VersionSource
from service_gateway.app.versioning.resolver import (
    VersionResolver,
    normalize_prefix,
    parse_version_segment,
    version_segment,
)


class TestApiVersion:
    """Test cases for ApiVersion."""

    @pytest.mark.parametrize("text,expected", [
        ("1", ApiVersion(1, 0)),
        ("1.0", ApiVersion(1, 0)),
        ("2.5", ApiVersion(2, 5)),
        (" 3.1 ", ApiVersion(3, 1)),
        ("10.02", ApiVersion(10, 2)),
    ])
    def test_parse_valid(self, text, expected):
        """Test parsing of major and major.minor forms."""
        assert ApiVersion.parse(text) == expected

    @pytest.mark.parametrize("text", [None, "", "v1", "1.", ".1", "1.0.0", "1.x", "-1", "one", "1 .0"])
    def test_parse_malformed_returns_none(self, text):
        """Test malformed text is reported as absent, not raised."""
        assert ApiVersion.parse(text) is None

    @pytest.mark.parametrize("text", ["1" * 5000, "1." + "9" * 5000, "1234567890"])
    def test_parse_oversized_returns_none(self, text):
        """Test digit strings too long for a version component are malformed."""
        assert ApiVersion.parse(text) is None

    def test_ordering_is_by_major_then_minor(self):

        """Test total ordering."""
        versions = [ApiVersion(2, 0), ApiVersion(1, 10), ApiVersion(1, 2), ApiVersion(0, 9)]
        assert sorted(versions) == [ApiVersion(0, 9), ApiVersion(1, 2), ApiVersion(1, 10), ApiVersion(2, 0)]
        assert ApiVersion(1, 2) < ApiVersion(1, 10)
        assert ApiVersion(2, 0) >= ApiVersion(2, 0)

    def test_equality_and_hash_are_structural(self):
        """Test equal versions collapse in sets."""
        assert ApiVersion(1, 0) == ApiVersion(1)
        assert len({ApiVersion(1, 0), ApiVersion(1), ApiVersion(2, 0)}) == 2

    def test_is_immutable(self):
        """Test versions cannot be mutated."""
        version = ApiVersion(1, 0)
        with pytest.raises(Exception):
            version.major = 2

    def test_negative_components_rejected(self):
        """Test negative components are invalid."""
        with pytest.raises(ValueError):
            ApiVersion(-1, 0)

    def test_formatting(self):
        """Test string and group name formatting."""
        assert str(ApiVersion(2, 1)) == "2.1"
        assert ApiVersion(1).group_name == "v1.0"


class TestPathTokens:
    """Test cases for version path segments."""

    @pytest.mark.parametrize("segment,expected", [
        ("v1", ApiVersion(1, 0)),
        ("v1.0", ApiVersion(1, 0)),
        ("V2.3", ApiVersion(2, 3)),
    ])
    def test_parse_version_segment(self, segment, expected):
        assert parse_version_segment(segment) == expected

    @pytest.mark.parametrize("segment", ["v", "v1.", "v1.x", "vX", "version", "v1.0.0", "1.0", "v 1"])
    def test_parse_version_segment_rejects_malformed(self, segment):
        assert parse_version_segment(segment) is None

    def test_version_segment_reads_first_position(self):
        """Test only the segment right after the prefix is a version position."""
        assert version_segment("/api/v2/items/v3", "/api") == "v2"
        assert version_segment("/v1.0/resource") == "v1.0"

    @pytest.mark.parametrize("path,prefix", [
        ("/api/files/v2", "/api"),
        ("/api/vehicles", "/api"),
        ("/health/v2", "/api"),
        ("/items/v2", ""),
        ("/api", "/api"),
    ])
    def test_version_segment_absent(self, path, prefix):
        assert version_segment(path, prefix) is None

    @pytest.mark.parametrize("prefix,expected", [
        ("/api", "/api"),
        ("api/", "/api"),
        ("/", ""),
        ("", ""),
    ])
    def test_normalize_prefix(self, prefix, expected):
        assert normalize_prefix(prefix) == expected



class TestVersionResolver:
    """Test cases for VersionResolver precedence."""

    @pytest.fixture
    def resolver(self):
        """Create VersionResolver with default 1.0."""
        return VersionResolver(ApiVersion(1, 0))

    def test_path_wins_over_header_and_query(self, resolver):
        """Path /v1.0/resource with header 2.0 and query 3.0 resolves to 1.0."""
        resolved = resolver.resolve(
            "/v1.0/resource",
            {"x-api-version": "2.0"},
            {"api-version": "3.0"},
        )

        assert resolved.version == ApiVersion(1, 0)
        assert resolved.source is VersionSource.PATH_SEGMENT

    def test_header_used_without_path_segment(self, resolver):
        """Path /resource with header 2.0 resolves to 2.0."""
        resolved = resolver.resolve("/resource", {"x-api-version": "2.0"}, {})

        assert resolved.version == ApiVersion(2, 0)
        assert resolved.source is VersionSource.HEADER

    def test_header_wins_over_query(self, resolver):
        """Test header is used unconditionally when both header and query parse."""
        resolved = resolver.resolve("/resource", {"x-api-version": "1.0"}, {"api-version": "3.0"})

        assert resolved.version == ApiVersion(1, 0)
        assert resolved.source is VersionSource.HEADER

    def test_query_used_when_only_signal(self, resolver):
        resolved = resolver.resolve("/resource", {}, {"api-version": "3"})

        assert resolved.version == ApiVersion(3, 0)
        assert resolved.source is VersionSource.QUERY_PARAM

    def test_default_when_no_signal(self, resolver):
        """No signals anywhere resolves to the configured default."""
        resolved = resolver.resolve("/resource", {}, {})

        assert resolved.version == ApiVersion(1, 0)
        assert resolved.source is VersionSource.DEFAULT
        assert resolved.is_default

    def test_malformed_path_falls_through_to_header(self, resolver):
        """Test malformed path token is treated as absent."""
        resolved = resolver.resolve("/v1.x/resource", {"x-api-version": "2.0"}, {})

        assert resolved.version == ApiVersion(2, 0)
        assert resolved.source is VersionSource.HEADER

    def test_malformed_header_falls_through_to_query(self, resolver):
        resolved = resolver.resolve("/resource", {"x-api-version": "latest"}, {"api-version": "2.1"})

        assert resolved.version == ApiVersion(2, 1)
        assert resolved.source is VersionSource.QUERY_PARAM

    def test_everything_malformed_uses_default(self, resolver):
        resolved = resolver.resolve("/vX/resource", {"x-api-version": ""}, {"api-version": "abc"})

        assert resolved.version == ApiVersion(1, 0)
        assert resolved.source is VersionSource.DEFAULT

    def test_key_names_are_case_insensitive(self, resolver):
        """Test header and query keys match regardless of case."""
        by_header = resolver.resolve("/resource", {"X-API-Version": "2.0"}, {})
        by_query = resolver.resolve("/resource", {}, {"API-Version": "3.0"})

        assert by_header.version == ApiVersion(2, 0)
        assert by_query.version == ApiVersion(3, 0)

    def test_custom_key_names(self):
        """Test configured header and query names replace the defaults."""
        resolver = VersionResolver(ApiVersion(1, 0), header_name="api-version", query_param="v")

        assert resolver.resolve("/r", {"api-version": "4.0"}, {}).version == ApiVersion(4, 0)
        assert resolver.resolve("/r", {}, {"v": "5"}).version == ApiVersion(5, 0)
        assert resolver.resolve("/r", {"x-api-version": "2.0"}, {}).is_default

    def test_resolution_is_deterministic(self, resolver):
        """Test identical inputs produce equal results."""
        first = resolver.resolve("/api/items", {"x-api-version": "2"}, {})
        second = resolver.resolve("/api/items", {"x-api-version": "2"}, {})

        assert first == second

    @pytest.mark.parametrize("path,headers,query", [
        ("/v" + "1" * 5000 + "/resource", {}, {}),
        ("/resource", {"x-api-version": "1" * 5000}, {}),
        ("/resource", {}, {"api-version": "9" * 5000}),
    ])
    def test_oversized_signals_count_as_absent(self, resolver, path, headers, query):
        resolved = resolver.resolve(path, headers, query)

        assert resolved.version == ApiVersion(1, 0)
        assert resolved.source is VersionSource.DEFAULT

    def test_oversized_header_falls_through_to_query(self, resolver):
        resolved = resolver.resolve("/resource", {"x-api-version": "2" * 5000}, {"api-version": "2.0"})

        assert resolved.version == ApiVersion(2, 0)
        assert resolved.source is VersionSource.QUERY_PARAM


class TestPrefixedVersionResolver:
    """Test cases for path versions behind an API prefix."""

    @pytest.fixture
    def resolver(self):
        return VersionResolver(ApiVersion(1, 0), api_prefix="/api")

    def test_segment_after_prefix_is_read(self, resolver):
        resolved = resolver.resolve("/api/v2/items", {"x-api-version": "1.0"}, {})

        assert resolved.version == ApiVersion(2, 0)
        assert resolved.source is VersionSource.PATH_SEGMENT

    def test_later_version_like_segment_is_a_resource_id(self, resolver):
        """Test /api/files/v2 keeps the header version."""
        resolved = resolver.resolve("/api/files/v2", {"x-api-version": "1.0"}, {})

        assert resolved.version == ApiVersion(1, 0)
        assert resolved.source is VersionSource.HEADER

    def test_version_like_segment_outside_prefix_ignored(self, resolver):
        resolved = resolver.resolve("/swagger/v2.0/swagger.json", {}, {})

        assert resolved.is_default
