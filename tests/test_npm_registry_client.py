"""Tests for the npm registry oracle client."""

from unittest.mock import patch

import pytest

from cli_config import SnapshotConfig
from registry.npm.client import NpmRegistryClient, package_url
from versioning.errors import OracleError


PACKUMENT = {
    "name": "lib-a",
    "dist-tags": {"latest": "1.2.0", "next": "2.0.0-beta.1"},
    "versions": {
        "1.0.0": {"dependencies": {"lib-b": "^1.0.0"}},
        "1.2.0": {"dependencies": {"lib-b": "^2.0.0", "lib-c": "~0.3.1"}},
        "2.0.0-beta.1": {"dependencies": None},
    },
}


@pytest.fixture
def client():
    return NpmRegistryClient(registry_url="https://registry.example.test", timeout=5, retries=1)


class TestNpmRegistryClient:
    """Packument-backed dependency and version lookups."""

    def test_package_url_encodes_scope(self):
        assert package_url("https://registry.npmjs.org/", "@types/node") == \
            "https://registry.npmjs.org/@types%2Fnode"
        assert package_url("https://r.test", "lodash") == "https://r.test/lodash"

    @patch("registry.npm.client.get_json")
    def test_dependencies_of_exact_version(self, mock_get_json, client):
        mock_get_json.return_value = (200, {}, PACKUMENT)

        deps = client.get_direct_dependencies("lib-a", "1.0.0")

        assert deps == {"lib-b": "^1.0.0"}
        url = mock_get_json.call_args[0][0]
        assert url == "https://registry.example.test/lib-a"
        assert mock_get_json.call_args[1]["timeout"] == 5
        assert mock_get_json.call_args[1]["retries"] == 1

    @patch("registry.npm.client.get_json")
    def test_default_version_is_latest_tag(self, mock_get_json, client):
        mock_get_json.return_value = (200, {}, PACKUMENT)

        deps = client.get_direct_dependencies("lib-a")

        assert deps == {"lib-b": "^2.0.0", "lib-c": "~0.3.1"}

    @patch("registry.npm.client.get_json")
    def test_dist_tag_version(self, mock_get_json, client):
        mock_get_json.return_value = (200, {}, PACKUMENT)
        assert client.get_direct_dependencies("lib-a", "next") == {}

    @patch("registry.npm.client.get_json")
    def test_unknown_version_raises(self, mock_get_json, client):
        mock_get_json.return_value = (200, {}, PACKUMENT)
        with pytest.raises(OracleError):
            client.get_direct_dependencies("lib-a", "9.9.9")

    @patch("registry.npm.client.get_json")
    def test_published_versions(self, mock_get_json, client):
        mock_get_json.return_value = (200, {}, PACKUMENT)
        assert client.get_published_versions("lib-a") == ["1.0.0", "1.2.0", "2.0.0-beta.1"]

    @patch("registry.npm.client.get_json")
    def test_not_found_raises(self, mock_get_json, client):
        mock_get_json.return_value = (404, {}, None)
        with pytest.raises(OracleError) as exc_info:
            client.get_published_versions("missing-pkg")
        assert exc_info.value.status_code == 404
        assert exc_info.value.package == "missing-pkg"

    @patch("registry.npm.client.get_json")
    def test_transport_failure_raises(self, mock_get_json, client):
        mock_get_json.return_value = (0, {}, None)
        with pytest.raises(OracleError):
            client.get_direct_dependencies("lib-a", "1.0.0")

    @patch("registry.npm.client.get_json")
    def test_server_error_raises(self, mock_get_json, client):
        mock_get_json.return_value = (503, {}, None)
        with pytest.raises(OracleError) as exc_info:
            client.get_published_versions("lib-a")
        assert exc_info.value.status_code == 503

    @patch("registry.npm.client.get_json")
    def test_bad_json_raises(self, mock_get_json, client):
        mock_get_json.return_value = (200, {}, None)
        with pytest.raises(OracleError):
            client.get_published_versions("lib-a")

    @patch("registry.npm.client.get_json")
    def test_package_without_versions(self, mock_get_json, client):
        mock_get_json.return_value = (200, {}, {"name": "empty"})
        assert client.get_published_versions("empty") == []

    def test_from_config(self):
        config = SnapshotConfig(registry_url="https://mirror.test/", request_timeout=7.5, retry_max=4)
        client = NpmRegistryClient.from_config(config)
        assert client.registry_url == "https://mirror.test/"
        assert client.timeout == 7.5
        assert client.retries == 4
