# SPDX-License-Identifier: MIT
#
#  █████╗ ██████╗  █████╗ ███████╗
# ██╔══██╗██╔══██╗██╔══██╗██╔════╝
# ███████║██████╔╝███████║███████╗
# ██╔══██║██╔══██╗██╔══██║╚════██║
# ██║  ██║██║  ██║██║  ██║███████║
# ╚═╝  ╚═╝╚═╝  ╚═╝╚═╝  ╚═╝╚══════╝
# Copyright (C) 2026 Riza Emre ARAS <r.emrearas@proton.me>
#
# Licensed under the MIT License.
# See LICENSE and THIRD_PARTY_LICENSES for details.
"""Tests for YAML client config loading."""
import pytest

from sparql_client import Client
from sparql_client.config import ClientConfig, build_config, load_config
from sparql_client.errors import ConfigurationError
from sparql_client.result import Fail, Ok

FULL = """\
endpoint: https://query.example.org/sparql
update_endpoint: https://query.example.org/update
method: get
timeout: 10
user_agent: tests/1.0
headers:
  Authorization: Bearer token
graph_parameters: true
named_graphs:
  - http://example.org/n
retry:
  attempts: 3
  delay_seconds: 0.5
"""


class TestLoadConfig:
    def test_full_file(self, tmp_path):
        path = tmp_path / "client.yaml"
        path.write_text(FULL, encoding="utf-8")

        result = load_config(path)
        assert isinstance(result, Ok)
        config = result.data
        assert config.endpoint == "https://query.example.org/sparql"
        assert config.update_endpoint == "https://query.example.org/update"
        assert config.method == "GET"
        assert config.timeout == 10
        assert config.headers == {"Authorization": "Bearer token"}
        assert config.graph_parameters is True
        assert config.named_graphs == ("http://example.org/n",)
        assert config.retry.attempts == 3
        assert config.retry.delay_seconds == 0.5

    def test_defaults(self, tmp_path):
        path = tmp_path / "client.yaml"
        path.write_text("endpoint: http://localhost:3030/ds/sparql\n", encoding="utf-8")
        config = load_config(path).unwrap()
        assert config.method == "POST"
        assert config.timeout == 30
        assert config.retry.attempts == 1
        assert config.update_endpoint is None

    def test_missing_file(self, tmp_path):
        result = load_config(tmp_path / "nope.yaml")
        assert isinstance(result, Fail)
        assert "Config file not found" in result.error

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "client.yaml"
        path.write_text("endpoint: [unclosed\n", encoding="utf-8")
        result = load_config(path)
        assert not result.ok
        assert result.error.startswith("YAML parse error")
        assert result.context == str(path)

    def test_root_must_be_mapping(self, tmp_path):
        path = tmp_path / "client.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        assert load_config(path).error == "Config root must be a mapping"

    def test_unwrap_raises(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Config file not found"):
            load_config(tmp_path / "nope.yaml").unwrap()


class TestBuildConfig:
    @pytest.mark.parametrize("raw,message", [
        ({"method": "PUT"}, "Unsupported HTTP method"),
        ({"timeout": 0}, "Timeout must be positive"),
        ({"retry": {"attempts": 0}}, "Retry attempts"),
        ({"retry": {"delay_seconds": -1}}, "Retry delay"),
        ({"timeout": "soon"}, "Config structure error"),
    ])
    def test_invalid(self, raw, message):
        result = build_config(raw)
        assert isinstance(result, Fail)
        assert message in result.error

    def test_empty_mapping_gives_defaults(self):
        assert build_config({}).unwrap() == ClientConfig()


class TestClientFromConfig:
    def test_from_config(self, tmp_path):
        path = tmp_path / "client.yaml"
        path.write_text(FULL, encoding="utf-8")
        client = Client.from_config(path)
        assert client.endpoint == "https://query.example.org/sparql"
        assert client.transport.update_endpoint == "https://query.example.org/update"

    def test_from_config_without_endpoint(self, tmp_path):
        path = tmp_path / "client.yaml"
        path.write_text("timeout: 5\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            Client.from_config(path)

    def test_from_bad_config(self, tmp_path):
        path = tmp_path / "client.yaml"
        path.write_text("method: PATCH\nendpoint: http://x\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Unsupported HTTP method"):
            Client.from_config(path)
