import base64
import unittest
from urllib.parse import unquote
from unittest.mock import patch

import requests

from credentials import Credentials
from errors import BackendHttpError, CredentialError, TransportError
from fakes import SITE, make_response
from http_client import ApiClient, build_client
from method_registry import ApiKind


class TestBuildClient(unittest.TestCase):

    def test_content_client_uses_basic_auth(self):
        creds = Credentials(site_url=SITE, username="admin", password="secret")
        client = build_client(creds, ApiKind.CONTENT, "get_posts", timeout=3)

        expected = base64.b64encode(b"admin:secret").decode()
        self.assertEqual(client.base_url, f"{SITE}/wp-json/wp/v2")
        self.assertEqual(client.headers["Authorization"], f"Basic {expected}")
        self.assertEqual(client.auth_params, {})
        self.assertEqual(client.timeout, 3)

    def test_commerce_client_uses_query_keys(self):
        creds = Credentials(site_url=SITE, consumer_key="ck", consumer_secret="cs")
        client = build_client(creds, ApiKind.COMMERCE, "get_products")

        self.assertEqual(client.base_url, f"{SITE}/wp-json/wc/v3")
        self.assertEqual(client.auth_params, {"consumer_key": "ck", "consumer_secret": "cs"})
        self.assertNotIn("Authorization", client.headers)

    def test_missing_credentials(self):
        with self.assertRaises(CredentialError):
            build_client(Credentials(site_url=SITE, username="admin"), ApiKind.CONTENT, "get_posts")
        with self.assertRaises(CredentialError):
            build_client(Credentials(site_url=SITE, consumer_secret="cs"), ApiKind.COMMERCE, "get_orders")


class TestApiClient(unittest.TestCase):

    def setUp(self):
        patcher = patch("http_client.requests.Session")
        self.session_cls = patcher.start()
        self.addCleanup(patcher.stop)
        self.request = self.session_cls.return_value.request
        self.client = ApiClient(f"{SITE}/wp-json/wc/v3", auth_params={"consumer_key": "ck"}, timeout=4)

    def test_query_encoding(self):
        self.request.return_value = make_response(200, {"id": 1})

        result = self.client.delete("/products/1", params={"force": True, "reassign": None})

        self.assertEqual(result, {"id": 1})
        args, kwargs = self.request.call_args
        self.assertEqual(args, ("DELETE", f"{SITE}/wp-json/wc/v3/products/1"))
        self.assertEqual(kwargs["params"], {"force": "true", "consumer_key": "ck"})
        self.assertIsNone(kwargs["json"])
        self.assertEqual(kwargs["timeout"], 4)
        self.assertEqual(kwargs["headers"]["Content-Type"], "application/json")

    def test_array_and_object_query_values(self):
        self.request.return_value = make_response(200, [])

        self.client.get("/products", params={
            "include": [1, 2],
            "attribute": {"pa_color": "red"},
            "tag": {"ids": [3, 4], "featured": True},
        })

        args, kwargs = self.request.call_args
        url = requests.Request("GET", args[1], params=kwargs["params"]).prepare().url
        query = unquote(url.split("?", 1)[1])
        self.assertEqual(
            query,
            "include[]=1&include[]=2&attribute[pa_color]=red"
            "&tag[ids][]=3&tag[ids][]=4&tag[featured]=true&consumer_key=ck",
        )

    def test_wordpress_error_message(self):
        body = {"code": "woocommerce_rest_product_invalid_id", "message": "Invalid ID.", "data": {"status": 404}}
        self.request.return_value = make_response(404, body, reason="Not Found")

        with self.assertRaises(BackendHttpError) as ctx:
            self.client.get("/products/9")

        self.assertEqual(ctx.exception.status, 404)
        self.assertEqual(ctx.exception.message, "API Error (404): Invalid ID.")
        self.assertEqual(ctx.exception.body, body)

    def test_plain_text_error(self):
        self.request.return_value = make_response(502, text="Bad gateway upstream", reason="Bad Gateway")
        with self.assertRaises(BackendHttpError) as ctx:
            self.client.get("/orders")
        self.assertEqual(ctx.exception.message, "API Error (502): Bad gateway upstream")

    def test_empty_error_uses_status_text(self):
        self.request.return_value = make_response(503, reason="Service Unavailable")
        with self.assertRaises(BackendHttpError) as ctx:
            self.client.get("/orders")
        self.assertEqual(ctx.exception.message, "API Error (503): Service Unavailable")

    def test_transport_failure(self):
        self.request.side_effect = requests.ConnectionError("connection refused")
        with self.assertRaises(TransportError) as ctx:
            self.client.get("/orders")
        self.assertTrue(ctx.exception.message.startswith("API Network/Setup Error: "))
        self.assertIn("connection refused", ctx.exception.message)

    def test_timeout_is_a_transport_failure(self):
        self.request.side_effect = requests.Timeout("read timed out")
        with self.assertRaises(TransportError):
            self.client.get("/orders")

    def test_empty_and_non_json_success(self):
        self.request.return_value = make_response(204)
        self.assertIsNone(self.client.put("/system_status/tools/x", {}))

        self.request.return_value = make_response(200, text="ok")
        self.assertEqual(self.client.get("/data"), "ok")


if __name__ == "__main__":
    unittest.main()
