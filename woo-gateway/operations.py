"""
Operation catalog.
Each supported method is described by an Operation: HTTP verb, path template,
which parameters are required, how the query string and body are built, and
for the few irregular methods a handler that takes over execution.
"""

from __future__ import annotations

import string
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional
from urllib.parse import quote

import handlers
from errors import ValidationError
from method_registry import ApiKind, classify


@dataclass(frozen=True)
class Operation:
    name: str
    verb: str
    path: str
    description: str
    body: Optional[str] = None               # param whose value is sent as the JSON body
    body_fields: tuple[str, ...] = ()        # body keys that must be non-empty
    body_keys: tuple[str, ...] = ()          # body keys that must merely exist
    non_empty_body: bool = False
    empty_body: bool = False                 # send {} as the body
    paginated: bool = False
    per_page_default: int = 10
    query: tuple[tuple[str, str], ...] = ()  # (param, query key) forwarded as-is
    fixed_query: tuple[tuple[str, Any], ...] = ()
    filters: bool = False
    force_default: Optional[bool] = None
    required: tuple[str, ...] = ()           # non-empty params beyond the path ids
    present: tuple[str, ...] = ()            # params that must exist, null allowed
    handler: Optional[Callable[["Operation", Any, dict], Any]] = None

    @property
    def kind(self) -> ApiKind:
        return classify(self.name)

    @property
    def path_params(self) -> tuple[str, ...]:
        return tuple(field for _, field, _, _ in string.Formatter().parse(self.path) if field)

    def expand_path(self, params: dict) -> str:
        return self.path.format(**{
            name: quote(str(params[name]), safe="") for name in self.path_params
        })


def is_missing(value: Any) -> bool:
    return value is None or value is False or (isinstance(value, str) and value == "")


def validate(op: Operation, params: dict) -> None:
    """Presence checks, run before any HTTP call is made."""
    for name in op.path_params + op.required:
        if is_missing(params.get(name)):
            raise ValidationError(f"{name} is required for {op.name}")
    for name in op.present:
        if name not in params:
            raise ValidationError(f"{name} is required for {op.name}")

    if op.body:
        payload = params.get(op.body)
        if is_missing(payload):
            raise ValidationError(f"{op.body} is required for {op.name}")
        if op.body_fields or op.body_keys:
            fields = op.body_fields + op.body_keys
            if (
                not isinstance(payload, dict)
                or any(is_missing(payload.get(f)) for f in op.body_fields)
                or any(f not in payload for f in op.body_keys)
            ):
                raise ValidationError(f"{op.body} with {', '.join(fields)} is required for {op.name}")
        if op.non_empty_body and isinstance(payload, dict) and not payload:
            raise ValidationError(f"{op.body} must not be empty for {op.name}")

    if op.filters and params.get("filters") is not None and not isinstance(params["filters"], dict):
        raise ValidationError(f"filters must be an object for {op.name}")


def build_query(op: Operation, params: dict) -> dict:
    query: dict[str, Any] = {}
    if op.paginated:
        query["per_page"] = params.get("perPage") or op.per_page_default
        query["page"] = params.get("page") or 1
    for param, key in op.query:
        query[key] = params.get(param)
    for key, value in op.fixed_query:
        query[key] = value
    if op.force_default is not None:
        force = params.get("force")
        query["force"] = op.force_default if force is None else force
    if op.filters:
        query.update(params.get("filters") or {})
    return query


def execute(op: Operation, client, params: dict) -> Any:
    if op.handler is not None:
        return op.handler(op, client, params)
    body = params.get(op.body) if op.body else ({} if op.empty_body else None)
    return client.request(op.verb, op.expand_path(params), params=build_query(op, params), json_body=body)


# ---- Catalog builders ----

def _crud(
    singular: str,
    plural: str,
    path: str,
    id_param: str,
    data_param: str,
    label: str,
    force_default: bool = True,
    skip: tuple[str, ...] = (),
    paginated: bool = True,
    delete_query: tuple[tuple[str, str], ...] = (),
) -> list[Operation]:
    item = f"{path}/{{{id_param}}}"
    ops = [
        Operation(f"get_{plural}", "GET", path, f"List {plural.replace('_', ' ')}",
                  paginated=paginated, filters=paginated),
        Operation(f"get_{singular}", "GET", item, f"Get a {label} by {id_param}"),
        Operation(f"create_{singular}", "POST", path, f"Create a {label} from {data_param}",
                  body=data_param),
        Operation(f"update_{singular}", "PUT", item, f"Update a {label} with {data_param}",
                  body=data_param, non_empty_body=True),
        Operation(f"delete_{singular}", "DELETE", item,
                  f"Delete a {label} (force defaults to {str(force_default).lower()})",
                  force_default=force_default, query=delete_query),
    ]
    return [op for op in ops if op.name.split("_", 1)[0] not in skip]


def _meta(resource: str, path: str, id_param: str) -> list[Operation]:
    item = f"{path}/{{{id_param}}}"
    return [
        Operation(f"get_{resource}_meta", "GET", item,
                  f"Read the {resource} meta_data array, optionally filtered by metaKey",
                  handler=handlers.get_resource_meta),
        Operation(f"create_{resource}_meta", "PUT", item,
                  f"Add or replace a {resource} meta_data entry",
                  required=("metaKey",), present=("metaValue",), handler=handlers.set_resource_meta),
        Operation(f"update_{resource}_meta", "PUT", item,
                  f"Replace or add a {resource} meta_data entry",
                  required=("metaKey",), present=("metaValue",), handler=handlers.set_resource_meta),
        Operation(f"delete_{resource}_meta", "PUT", item,
                  f"Remove every {resource} meta_data entry with metaKey",
                  required=("metaKey",), handler=handlers.delete_resource_meta),
    ]


def _report(name: str, path: str, label: str, query=(("dateMin", "date_min"), ("dateMax", "date_max"))) -> Operation:
    return Operation(name, "GET", path, f"Get the {label} report", query=query, filters=True)


_CONTENT = [
    Operation("create_post", "POST", "/posts", "Create a post (status defaults to draft)",
              required=("title", "content"), handler=handlers.create_post),
    Operation("get_posts", "GET", "/posts", "List posts", paginated=True, filters=True),
    Operation("update_post", "POST", "/posts/{postId}", "Update a post's title, content or status",
              handler=handlers.update_post),
    Operation("get_post_meta", "GET", "/posts/{postId}", "Read a post's meta object",
              handler=handlers.get_post_meta),
    Operation("create_post_meta", "POST", "/posts/{postId}", "Set a post meta key",
              required=("metaKey",), present=("metaValue",), handler=handlers.set_post_meta),
    Operation("update_post_meta", "POST", "/posts/{postId}", "Set a post meta key",
              required=("metaKey",), present=("metaValue",), handler=handlers.set_post_meta),
    Operation("delete_post_meta", "POST", "/posts/{postId}", "Clear a post meta key",
              required=("metaKey",), handler=handlers.delete_post_meta),
]

_COMMERCE = [
    *_crud("product", "products", "/products", "productId", "productData", "product", force_default=False),
    *_crud("order", "orders", "/orders", "orderId", "orderData", "order", force_default=False),
    *_crud("customer", "customers", "/customers", "customerId", "customerData", "customer",
           force_default=False, delete_query=(("reassign", "reassign"),)),

    _report("get_sales_report", "/reports/sales", "sales",
            query=(("period", "period"), ("dateMin", "date_min"), ("dateMax", "date_max"))),
    _report("get_products_report", "/reports/products/totals", "product totals"),
    _report("get_orders_report", "/reports/orders/totals", "order totals"),
    _report("get_categories_report", "/reports/categories/totals", "category totals", query=()),
    _report("get_customers_report", "/reports/customers/totals", "customer totals"),
    _report("get_coupons_report", "/reports/coupons/totals", "coupon totals"),
    _report("get_taxes_report", "/reports/taxes/totals", "tax totals"),
    Operation("get_stock_report", "GET", "/products", "List in-stock products (perPage defaults to 100)",
              handler=handlers.get_stock_report),

    *_crud("shipping_zone", "shipping_zones", "/shipping/zones", "zoneId", "zoneData", "shipping zone",
           paginated=False),
    Operation("get_shipping_methods", "GET", "/shipping_methods", "List registered shipping method types"),
    Operation("get_shipping_zone_methods", "GET", "/shipping/zones/{zoneId}/methods",
              "List the shipping methods of a zone"),
    Operation("create_shipping_zone_method", "POST", "/shipping/zones/{zoneId}/methods",
              "Add a shipping method to a zone", body="methodData"),
    Operation("update_shipping_zone_method", "PUT", "/shipping/zones/{zoneId}/methods/{instanceId}",
              "Update a shipping method instance of a zone", body="methodData", non_empty_body=True),
    Operation("delete_shipping_zone_method", "DELETE", "/shipping/zones/{zoneId}/methods/{instanceId}",
              "Remove a shipping method instance from a zone", force_default=True),
    Operation("get_shipping_zone_locations", "GET", "/shipping/zones/{zoneId}/locations",
              "List the locations of a shipping zone"),
    Operation("update_shipping_zone_locations", "POST", "/shipping/zones/{zoneId}/locations",
              "Replace the locations of a shipping zone", body="locations"),

    Operation("get_tax_classes", "GET", "/taxes/classes", "List tax classes"),
    Operation("create_tax_class", "POST", "/taxes/classes", "Create a tax class",
              body="taxClassData", body_fields=("name",)),
    Operation("delete_tax_class", "DELETE", "/taxes/classes/{slug}", "Delete a tax class by slug",
              force_default=True),
    *_crud("tax_rate", "tax_rates", "/taxes", "rateId", "taxRateData", "tax rate"),

    *_crud("coupon", "coupons", "/coupons", "couponId", "couponData", "coupon"),

    *_crud("order_note", "order_notes", "/orders/{orderId}/notes", "noteId", "noteData", "order note",
           skip=("update",)),
    *_crud("order_refund", "order_refunds", "/orders/{orderId}/refunds", "refundId", "refundData",
           "order refund", skip=("update",)),
    *_crud("product_variation", "product_variations", "/products/{productId}/variations", "variationId",
           "variationData", "product variation"),
    *_crud("product_attribute", "product_attributes", "/products/attributes", "attributeId",
           "attributeData", "product attribute"),
    *_crud("attribute_term", "attribute_terms", "/products/attributes/{attributeId}/terms", "termId",
           "termData", "attribute term"),
    *_crud("product_category", "product_categories", "/products/categories", "categoryId",
           "categoryData", "product category"),
    *_crud("product_tag", "product_tags", "/products/tags", "tagId", "tagData", "product tag"),
    *_crud("product_review", "product_reviews", "/products/reviews", "reviewId", "reviewData",
           "product review"),

    Operation("get_payment_gateways", "GET", "/payment_gateways", "List payment gateways"),
    Operation("get_payment_gateway", "GET", "/payment_gateways/{gatewayId}", "Get a payment gateway"),
    Operation("update_payment_gateway", "PUT", "/payment_gateways/{gatewayId}", "Update a payment gateway",
              body="gatewayData", non_empty_body=True),

    Operation("get_settings", "GET", "/settings", "List setting groups"),
    Operation("get_setting_options", "GET", "/settings/{group}", "List the options of a setting group"),
    Operation("update_setting_option", "PUT", "/settings/{group}/{id}", "Update one setting option",
              body="settingData", body_keys=("value",)),

    Operation("get_system_status", "GET", "/system_status", "Get the system status report"),
    Operation("get_system_status_tools", "GET", "/system_status/tools", "List system status tools"),
    Operation("run_system_status_tool", "PUT", "/system_status/tools/{toolId}", "Run a system status tool",
              empty_body=True),

    Operation("get_data", "GET", "/data", "List the data endpoints"),
    Operation("get_continents", "GET", "/data/continents", "List continents"),
    Operation("get_countries", "GET", "/data/countries", "List countries"),
    Operation("get_currencies", "GET", "/data/currencies", "List currencies"),
    Operation("get_current_currency", "GET", "/data/currencies/current", "Get the store currency"),

    *_meta("product", "/products", "productId"),
    *_meta("order", "/orders", "orderId"),
    *_meta("customer", "/customers", "customerId"),
]


def _catalog(ops: list[Operation]) -> dict[str, Operation]:
    table = {op.name: op for op in ops}
    # create payloads that must carry specific fields
    for name, fields in (
        ("create_order_note", ("note",)),
        ("create_product_review", ("product_id", "review", "reviewer", "reviewer_email")),
    ):
        table[name] = replace(table[name], body_fields=fields)
    return table


OPERATIONS: dict[str, Operation] = _catalog(_CONTENT + _COMMERCE)
