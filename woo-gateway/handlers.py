"""
Handlers for the methods that do not fit the plain request table:
post creation and update, post meta, the stock report, and meta_data
read-modify-write on products, orders and customers.
"""

from __future__ import annotations

import logging
from typing import Any

from errors import ValidationError

logger = logging.getLogger(__name__)

POST_FIELDS = ("title", "content", "status")


def _field(payload: Any, name: str) -> Any:
    return payload.get(name) if isinstance(payload, dict) else None


def _meta_data(resource: Any) -> list:
    items = _field(resource, "meta_data")
    return list(items) if isinstance(items, list) else []


def _has_key(entry: Any, key: str) -> bool:
    return isinstance(entry, dict) and entry.get("key") == key


# ---- Posts ----

def create_post(op, client, params: dict) -> Any:
    return client.post(op.expand_path(params), {
        "title": params["title"],
        "content": params["content"],
        "status": params.get("status") or "draft",
    })


def update_post(op, client, params: dict) -> Any:
    update = {name: params[name] for name in POST_FIELDS if params.get(name)}
    if not update:
        raise ValidationError("No data provided to update for update_post")
    # WordPress takes updates as POST
    return client.post(op.expand_path(params), update)


def get_post_meta(op, client, params: dict) -> Any:
    logger.warning("Post meta is only returned for keys registered with show_in_rest.")
    post = client.get(op.expand_path(params), params={"context": "edit"})
    return _field(post, "meta") or {}


def set_post_meta(op, client, params: dict) -> Any:
    updated = client.post(op.expand_path(params), {"meta": {params["metaKey"]: params["metaValue"]}})
    return _field(updated, "meta")


def delete_post_meta(op, client, params: dict) -> Any:
    # clearing the value is how the REST API removes a post meta key
    updated = client.post(op.expand_path(params), {"meta": {params["metaKey"]: None}})
    return _field(updated, "meta")


# ---- Reports ----

def get_stock_report(op, client, params: dict) -> Any:
    # WooCommerce has no stock report endpoint; in-stock products stand in for it
    return client.get(op.expand_path(params), params={
        "stock_status": "instock",
        "per_page": params.get("perPage") or 100,
    })


# ---- meta_data on products, orders and customers ----
#
# Writes fetch the whole array, edit it locally and PUT it back. There is no
# conditional request, so concurrent writers to the same resource can lose
# updates (last PUT wins).

def get_resource_meta(op, client, params: dict) -> list:
    meta = _meta_data(client.get(op.expand_path(params)))
    key = params.get("metaKey")
    if key:
        # keys are not unique, every match is returned
        return [entry for entry in meta if _has_key(entry, key)]
    return meta


def set_resource_meta(op, client, params: dict) -> Any:
    path = op.expand_path(params)
    key, value = params["metaKey"], params["metaValue"]
    meta = _meta_data(client.get(path))

    for entry in meta:
        if _has_key(entry, key):
            entry["value"] = value
            break
    else:
        meta.append({"key": key, "value": value})

    return _field(client.put(path, {"meta_data": meta}), "meta_data")


def delete_resource_meta(op, client, params: dict) -> Any:
    path = op.expand_path(params)
    key = params["metaKey"]
    meta = _meta_data(client.get(path))

    remaining = [entry for entry in meta if not _has_key(entry, key)]
    if len(remaining) == len(meta):
        logger.warning(f"Meta key '{key}' not found for {path}. No changes made.")
        return meta

    return _field(client.put(path, {"meta_data": remaining}), "meta_data")
