"""
Tests for JSON-RPC Server

Tests the JSON-RPC wrapper around ValidationService API.
"""
import io
import json
import logging
from unittest.mock import patch

import pytest
from directive_validator.config_loader import ConfigLoader
from directive_validator.jsonrpc_server import ValidationJsonRpcServer, main


@pytest.fixture
def server(tmp_path, monkeypatch):
    """Create a ValidationJsonRpcServer instance with a temporary document cache."""
    monkeypatch.setattr(ConfigLoader, "CACHE_DIR", tmp_path / "cache")
    return ValidationJsonRpcServer(debug=False)


def rpc(method, params=None, request_id=1):
    request = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        request["params"] = params
    return json.dumps(request)


class TestRequestParsing:
    """Test JSON-RPC request parsing."""

    def test_valid_request(self, server):
        """Test parsing valid JSON-RPC request."""
        response = server.handle_request(rpc("discover_record_types", {}))

        assert response["jsonrpc"] == "2.0"
        assert response["id"] == 1
        assert "result" in response

    def test_invalid_json(self, server):
        """Test handling invalid JSON."""
        response = server.handle_request("not valid json {")

        assert response["error"]["code"] == server.ERROR_PARSE

    def test_not_an_object(self, server):
        """Test handling a JSON array request."""
        response = server.handle_request("[1, 2]")

        assert response["error"]["code"] == server.ERROR_INVALID_REQUEST

    def test_wrong_jsonrpc_version(self, server):
        """Test handling wrong JSON-RPC version."""
        request = json.dumps({"jsonrpc": "1.0", "id": 1, "method": "discover_record_types"})

        response = server.handle_request(request)

        assert response["error"]["code"] == server.ERROR_INVALID_REQUEST

    def test_missing_method(self, server):
        """Test handling missing method field."""
        request = json.dumps({"jsonrpc": "2.0", "id": 1, "params": {}})

        response = server.handle_request(request)

        assert response["error"]["code"] == server.ERROR_INVALID_REQUEST

    def test_params_not_dict(self, server):
        """Test handling params that are not a dict."""
        response = server.handle_request(rpc("discover_record_types", [1, 2, 3]))

        assert response["error"]["code"] == server.ERROR_INVALID_PARAMS

    def test_unknown_method(self, server):
        """Test handling unknown method."""
        response = server.handle_request(rpc("nonexistent_method", {}))

        assert response["error"]["code"] == server.ERROR_METHOD_NOT_FOUND


class TestMethods:
    """Test method handlers."""

    def test_validate(self, server):
        """Test validate returns per-field results."""
        response = server.handle_request(rpc("validate", {
            "record_type": "person",
            "record": {"Name": "Al", "Age": 150},
        }))

        kinds = [r["kind"] for r in response["result"]]
        assert kinds == ["MIN_FAILED", "MAX_FAILED"]

    def test_validate_missing_params(self, server):
        """Test missing parameters are reported as errors."""
        response = server.handle_request(rpc("validate", {"record_type": "person"}))

        assert response["error"]["code"] == server.ERROR_INTERNAL
        assert "record" in response["error"]["message"]

    def test_validate_not_struct(self, server):
        """Test non-object records are reported as validation errors."""
        response = server.handle_request(rpc("validate", {
            "record_type": "person",
            "record": [1, 2],
        }))

        assert response["error"]["code"] == server.ERROR_VALIDATION
        assert response["error"]["data"] == {"kind": "NOT_STRUCT"}

    def test_batch_validate(self, server):
        """Test batch_validate."""
        response = server.handle_request(rpc("batch_validate", {
            "records": [{"id": "A", "Name": "Alice", "Age": 3}],
            "record_type": "person",
            "id_fields": ["id"],
        }))

        assert response["result"][0]["record_id"] == "A"

    def test_parse_directive(self, server):
        """Test parse_directive success and failure."""
        response = server.handle_request(rpc("parse_directive", {"directive": "min:5"}))
        assert response["result"] == {"operation": "min", "arguments": ["5"]}

        response = server.handle_request(rpc("parse_directive", {"directive": "min:5:6"}))
        assert response["error"]["code"] == server.ERROR_VALIDATION
        assert response["error"]["data"] == {"kind": "INVALID_SYNTAX"}

    def test_reload_config(self, server):
        """Test reload_config."""
        response = server.handle_request(rpc("reload_config"))

        assert response["result"]["status"] == "ok"


class TestServerLoop:
    """Test the stdin/stdout loop."""

    def test_processes_lines_until_eof(self, server, monkeypatch):
        """Test each request line produces one response line."""
        requests_in = "\n".join([
            rpc("parse_directive", {"directive": "len:2"}, request_id=1),
            "",
            rpc("parse_directive", {"directive": "bad"}, request_id=2),
        ]) + "\n"
        stdout = io.StringIO()
        monkeypatch.setattr("sys.stdin", io.StringIO(requests_in))
        monkeypatch.setattr("sys.stdout", stdout)

        server.start_server()

        lines = [json.loads(line) for line in stdout.getvalue().splitlines()]
        assert [r["id"] for r in lines] == [1, 2]
        assert "result" in lines[0]
        assert "error" in lines[1]


class TestMain:
    """Test the command-line entry point."""

    @pytest.mark.parametrize("argv,configured", [
        (["jsonrpc_server", "--debug"], True),
        (["jsonrpc_server"], False),
    ])
    def test_debug_flag_configures_logging(self, argv, configured, monkeypatch):
        """Test --debug routes library loggers to stderr at DEBUG level."""
        monkeypatch.setattr("sys.argv", argv)

        with patch("directive_validator.jsonrpc_server.logging.basicConfig") as basic_config, \
                patch("directive_validator.jsonrpc_server.signal.signal"), \
                patch.object(ValidationJsonRpcServer, "start_server") as start_server:
            main()

        start_server.assert_called_once_with()
        if configured:
            basic_config.assert_called_once()
            assert basic_config.call_args.kwargs["level"] == logging.DEBUG
        else:
            basic_config.assert_not_called()
