import io
import json
import unittest
from unittest.mock import patch

from errors import ValidationError
from fakes import GatewayTestCase, make_config
from stdio_gateway import process_line, serve


def _line(method, params=None, req_id=1):
    request = {"jsonrpc": "2.0", "id": req_id, "method": method}
    if params is not None:
        request["params"] = params
    return json.dumps(request)


class TestProcessLine(unittest.TestCase):

    def setUp(self):
        self.config = make_config()

    def test_blank_line_is_ignored(self):
        self.assertIsNone(process_line("   \n", self.config))

    def test_parse_error(self):
        response = process_line("{not json", self.config)
        self.assertIsNone(response["id"])
        self.assertEqual(response["error"]["code"], -32700)

    def test_invalid_requests(self):
        for payload in (
            {"jsonrpc": "2.0", "method": "get_products"},
            {"jsonrpc": "1.0", "id": 1, "method": "get_products"},
            {"jsonrpc": "2.0", "id": 1, "method": 5},
            {"jsonrpc": "2.0", "id": True, "method": "get_products"},
            [1, 2, 3],
        ):
            with self.subTest(payload=payload):
                response = process_line(json.dumps(payload), self.config)
                self.assertIsNone(response["id"])
                self.assertEqual(response["error"]["code"], -32600)

    def test_initialize(self):
        response = process_line(_line("initialize", req_id="init-1"), self.config)
        self.assertEqual(response["id"], "init-1")
        self.assertIn("tools", response["result"]["capabilities"])
        self.assertEqual(response["result"]["serverInfo"]["name"], "woocommerce-mcp-server")

    @patch("stdio_gateway.handle_request")
    def test_success(self, mock_handle):
        mock_handle.return_value = {"id": 42}

        response = process_line(_line("get_order", {"orderId": 42}, req_id=9), self.config)

        self.assertEqual(response, {"jsonrpc": "2.0", "id": 9, "result": {"id": 42}})
        mock_handle.assert_called_once_with("get_order", {"orderId": 42}, self.config)

    @patch("stdio_gateway.handle_request")
    def test_missing_params_become_empty_object(self, mock_handle):
        mock_handle.return_value = []
        process_line(_line("get_products"), self.config)
        mock_handle.assert_called_once_with("get_products", {}, self.config)

    def test_unknown_method(self):
        response = process_line(_line("does_not_exist", req_id=3), self.config)
        self.assertEqual(response["id"], 3)
        self.assertEqual(response["error"]["code"], -32601)
        self.assertEqual(response["error"]["data"]["kind"], "method_not_found")

    @patch("stdio_gateway.handle_request")
    def test_validation_error(self, mock_handle):
        mock_handle.side_effect = ValidationError("productId is required for get_product")
        response = process_line(_line("get_product"), self.config)
        self.assertEqual(response["error"]["code"], -32602)
        self.assertEqual(response["error"]["message"], "productId is required for get_product")

    @patch("stdio_gateway.handle_request")
    def test_unexpected_error(self, mock_handle):
        mock_handle.side_effect = RuntimeError("boom")
        with self.assertLogs("woo-gateway", level="ERROR"):
            response = process_line(_line("get_products"), self.config)
        self.assertEqual(response["error"]["code"], -32603)


class TestServe(GatewayTestCase):

    def test_round_trip_over_streams(self):
        self.backend.resources["/orders/42"] = {"id": 42}
        stdin = io.StringIO("\n".join([
            _line("initialize", req_id=1),
            "",
            _line("get_order", {"orderId": 42}, req_id=2),
            _line("get_order", {}, req_id=3),
        ]) + "\n")
        stdout = io.StringIO()

        serve(self.config, stdin=stdin, stdout=stdout)

        responses = [json.loads(line) for line in stdout.getvalue().splitlines()]
        self.assertEqual([r["id"] for r in responses], [1, 2, 3])
        self.assertEqual(responses[1]["result"], {"id": 42})
        self.assertEqual(responses[2]["error"]["code"], -32602)


if __name__ == "__main__":
    unittest.main()
