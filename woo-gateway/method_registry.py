from __future__ import annotations

from enum import Enum


class ApiKind(str, Enum):
    CONTENT = "content"      # /wp-json/wp/v2, HTTP Basic
    COMMERCE = "commerce"    # /wp-json/wc/v3, consumer key/secret
    UNKNOWN = "unknown"


CONTENT_METHODS = frozenset({
    "create_post", "get_posts", "update_post",
    "get_post_meta", "update_post_meta", "create_post_meta", "delete_post_meta",
})

COMMERCE_METHODS = frozenset({
    # Products, orders, customers
    "get_products", "get_product", "create_product", "update_product", "delete_product",
    "get_orders", "get_order", "create_order", "update_order", "delete_order",
    "get_customers", "get_customer", "create_customer", "update_customer", "delete_customer",
    # Reports
    "get_sales_report", "get_products_report", "get_orders_report", "get_categories_report",
    "get_customers_report", "get_stock_report", "get_coupons_report", "get_taxes_report",
    # Shipping
    "get_shipping_zones", "get_shipping_zone", "create_shipping_zone", "update_shipping_zone", "delete_shipping_zone",
    "get_shipping_methods", "get_shipping_zone_methods", "create_shipping_zone_method",
    "update_shipping_zone_method", "delete_shipping_zone_method",
    "get_shipping_zone_locations", "update_shipping_zone_locations",
    # Taxes
    "get_tax_classes", "create_tax_class", "delete_tax_class",
    "get_tax_rates", "get_tax_rate", "create_tax_rate", "update_tax_rate", "delete_tax_rate",
    # Coupons
    "get_coupons", "get_coupon", "create_coupon", "update_coupon", "delete_coupon",
    # Order notes and refunds
    "get_order_notes", "get_order_note", "create_order_note", "delete_order_note",
    "get_order_refunds", "get_order_refund", "create_order_refund", "delete_order_refund",
    # Product variations, attributes, terms, categories, tags, reviews
    "get_product_variations", "get_product_variation", "create_product_variation",
    "update_product_variation", "delete_product_variation",
    "get_product_attributes", "get_product_attribute", "create_product_attribute",
    "update_product_attribute", "delete_product_attribute",
    "get_attribute_terms", "get_attribute_term", "create_attribute_term",
    "update_attribute_term", "delete_attribute_term",
    "get_product_categories", "get_product_category", "create_product_category",
    "update_product_category", "delete_product_category",
    "get_product_tags", "get_product_tag", "create_product_tag", "update_product_tag", "delete_product_tag",
    "get_product_reviews", "get_product_review", "create_product_review",
    "update_product_review", "delete_product_review",
    # Payment gateways, settings, system status, data
    "get_payment_gateways", "get_payment_gateway", "update_payment_gateway",
    "get_settings", "get_setting_options", "update_setting_option",
    "get_system_status", "get_system_status_tools", "run_system_status_tool",
    "get_data", "get_continents", "get_countries", "get_currencies", "get_current_currency",
    # Meta data (read-modify-write on the parent resource)
    "get_product_meta", "update_product_meta", "create_product_meta", "delete_product_meta",
    "get_order_meta", "update_order_meta", "create_order_meta", "delete_order_meta",
    "get_customer_meta", "update_customer_meta", "create_customer_meta", "delete_customer_meta",
})


def classify(method: str) -> ApiKind:
    if method in CONTENT_METHODS:
        return ApiKind.CONTENT
    if method in COMMERCE_METHODS:
        return ApiKind.COMMERCE
    return ApiKind.UNKNOWN


def all_methods() -> list[str]:
    return sorted(CONTENT_METHODS | COMMERCE_METHODS)
