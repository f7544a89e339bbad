#!/usr/bin/env python3
"""
JSON-RPC 2.0 Server for ValidationService

Provides a JSON-RPC interface to directive-validator, enabling usage from any
programming language that can spawn a process and communicate via stdin/stdout.

Protocol: JSON-RPC 2.0 over stdin/stdout (newline-delimited JSON)
Specification: https://www.jsonrpc.org/specification

Usage:
    python -m directive_validator.jsonrpc_server [--config PATH] [--debug]

Example request (stdin):
    {"jsonrpc":"2.0","id":1,"method":"parse_directive","params":{"directive":"min:5"}}

Example response (stdout):
    {"jsonrpc":"2.0","id":1,"result":{"operation":"min","arguments":["5"]}}
"""

import sys
import json
import signal
import argparse
import logging
import traceback
from typing import Any, Dict, Optional

from directive_validator import ValidationService
from directive_validator.errors import DirectiveValidatorError


class ValidationJsonRpcServer:
    """JSON-RPC 2.0 server wrapping ValidationService API."""

    # JSON-RPC error codes
    ERROR_PARSE = -32700        # Invalid JSON
    ERROR_INVALID_REQUEST = -32600  # Invalid JSON-RPC structure
    ERROR_METHOD_NOT_FOUND = -32601  # Unknown method
    ERROR_INVALID_PARAMS = -32602   # Invalid parameters
    ERROR_INTERNAL = -32000      # Application error (catch-all)
    ERROR_VALIDATION = -32001    # Directive or record error

    def __init__(self, config_path: Optional[str] = None, debug: bool = False):
        """
        Initialize JSON-RPC server.

        Args:
            config_path: Optional local config YAML path
            debug: Enable debug logging to stderr
        """
        self.service = ValidationService(config_path)
        self.running = False
        self.debug = debug

        # Method dispatch table
        self.methods = {
            'validate': self._handle_validate,
            'batch_validate': self._handle_batch_validate,
            'parse_directive': self._handle_parse_directive,
            'discover_record_types': self._handle_discover_record_types,
            'reload_config': self._handle_reload_config,
        }

    def _log(self, message: str):
        """Log debug message to stderr (doesn't interfere with JSON-RPC on stdout)."""
        if self.debug:
            sys.stderr.write(f"[DEBUG] {message}\n")
            sys.stderr.flush()

    def start_server(self):
        """
        Start the JSON-RPC server loop.

        Reads requests from stdin, processes them, writes responses to stdout.
        Runs until EOF or stop signal received.
        """
        self.running = True
        self._log("ValidationService JSON-RPC server started")

        while self.running:
            try:
                line = sys.stdin.readline()

                if not line:
                    # EOF - clean shutdown
                    self._log("EOF received, shutting down")
                    break

                if not line.strip():
                    continue

                self._log(f"Received: {line.strip()}")
                response = self.handle_request(line)
                self._send_response(response)

            except KeyboardInterrupt:
                self._log("KeyboardInterrupt received, shutting down")
                break

            except Exception as e:
                # Fatal error in main loop
                self._log(f"Fatal error in main loop: {e}")
                traceback.print_exc(file=sys.stderr)
                break

        self._log("Server stopped")

    def stop_server(self):
        """Stop the server gracefully; the main loop exits after the current line."""
        self.running = False
        self._log("Stop signal received")

    def handle_request(self, request_json: str) -> Dict[str, Any]:
        """
        Parse and process a JSON-RPC request.

        Args:
            request_json: JSON-RPC request string

        Returns:
            JSON-RPC response dict (success or error)
        """
        request_id = None

        try:
            try:
                request = json.loads(request_json)
            except json.JSONDecodeError as e:
                return self._error_response(None, self.ERROR_PARSE,
                                           f"Parse error: {e}")

            if not isinstance(request, dict):
                return self._error_response(None, self.ERROR_INVALID_REQUEST,
                                           "Request must be a JSON object")

            if request.get("jsonrpc") != "2.0":
                return self._error_response(None, self.ERROR_INVALID_REQUEST,
                                           f"Invalid JSON-RPC version: {request.get('jsonrpc')}")

            request_id = request.get("id")
            method = request.get("method")
            params = request.get("params", {})

            if not method:
                return self._error_response(request_id, self.ERROR_INVALID_REQUEST,
                                           "Missing 'method' field")

            if not isinstance(params, dict):
                return self._error_response(request_id, self.ERROR_INVALID_PARAMS,
                                           f"Params must be an object, got {type(params).__name__}")

            if method not in self.methods:
                return self._error_response(request_id, self.ERROR_METHOD_NOT_FOUND,
                                           f"Method not found: {method}")

            self._log(f"Dispatching method: {method}")
            result = self.methods[method](params)

            return self._success_response(request_id, result)

        except DirectiveValidatorError as e:
            self._log(f"Validation error: {e}")
            return self._error_response(request_id, self.ERROR_VALIDATION, str(e),
                                        {"kind": e.kind.name})

        except Exception as e:
            # Catch any unexpected errors
            self._log(f"Error processing request: {e}")
            return self._error_response(request_id, self.ERROR_INTERNAL,
                                       f"Internal error: {e}")

    # Method handlers - wrap ValidationService API

    def _handle_validate(self, params: Dict[str, Any]) -> Any:
        """Handle 'validate' method."""
        record_type = params.get('record_type')
        record = params.get('record')

        if not record_type:
            raise ValueError("Missing required parameter: record_type")
        if record is None:
            raise ValueError("Missing required parameter: record")

        return self.service.validate_record(record_type, record)

    def _handle_batch_validate(self, params: Dict[str, Any]) -> Any:
        """Handle 'batch_validate' method."""
        records = params.get('records')
        record_type = params.get('record_type')
        id_fields = params.get('id_fields')

        if not records:
            raise ValueError("Missing required parameter: records")
        if not record_type:
            raise ValueError("Missing required parameter: record_type")
        if not id_fields:
            raise ValueError("Missing required parameter: id_fields")

        return self.service.batch_validate(records, record_type, id_fields)

    def _handle_parse_directive(self, params: Dict[str, Any]) -> Any:
        """Handle 'parse_directive' method."""
        directive = params.get('directive')

        if directive is None:
            raise ValueError("Missing required parameter: directive")

        return self.service.parse_directive(directive)

    def _handle_discover_record_types(self, params: Dict[str, Any]) -> Any:
        """Handle 'discover_record_types' method."""
        return self.service.discover_record_types()

    def _handle_reload_config(self, params: Dict[str, Any]) -> Any:
        """Handle 'reload_config' method."""
        self.service.reload_config()
        return {"status": "ok", "message": "Configuration reloaded successfully"}

    # Response formatting

    def _success_response(self, request_id: Any, result: Any) -> Dict[str, Any]:
        """Format successful JSON-RPC response."""
        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "result": result
        }

    def _error_response(self, request_id: Any, code: int, message: str,
                       data: Optional[Any] = None) -> Dict[str, Any]:
        """Format JSON-RPC error response."""
        error = {
            "code": code,
            "message": message
        }
        if data is not None:
            error["data"] = data

        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "error": error
        }

    def _send_response(self, response: Dict[str, Any]):
        """Send JSON-RPC response to stdout."""
        response_json = json.dumps(response)
        self._log(f"Sending: {response_json}")
        sys.stdout.write(response_json + "\n")
        sys.stdout.flush()


def main():
    """Main entry point for JSON-RPC server."""
    parser = argparse.ArgumentParser(
        description="directive-validator JSON-RPC 2.0 Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example usage:
  python -m directive_validator.jsonrpc_server
  python -m directive_validator.jsonrpc_server --config ./local-config.yaml --debug

Supported methods:
  - validate
  - batch_validate
  - parse_directive
  - discover_record_types
  - reload_config

Protocol: JSON-RPC 2.0 over stdin/stdout
See: https://www.jsonrpc.org/specification
        """
    )
    parser.add_argument('--config', default=None,
                        help='Path to a local config YAML file')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug logging to stderr')

    args = parser.parse_args()

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    server = ValidationJsonRpcServer(config_path=args.config, debug=args.debug)

    # Handle signals for graceful shutdown
    def signal_handler(sig, frame):
        server.stop_server()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    server.start_server()


if __name__ == "__main__":
    main()
