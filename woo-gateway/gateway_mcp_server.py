import asyncio
import json
import mcp.types as types
from base_mcp_server import BaseMcpServer

import handlers
from dispatcher import handle_request
from method_registry import all_methods
from operations import OPERATIONS, Operation

# Initialize Server
mcp = BaseMcpServer("woocommerce-gateway-mcp", "1.1.0")

CREDENTIAL_PROPERTIES = {
    "siteUrl": {"type": "string", "description": "Overrides WORDPRESS_SITE_URL"},
    "username": {"type": "string", "description": "Overrides WORDPRESS_USERNAME"},
    "password": {"type": "string", "description": "Overrides WORDPRESS_PASSWORD"},
    "consumerKey": {"type": "string", "description": "Overrides WOOCOMMERCE_CONSUMER_KEY"},
    "consumerSecret": {"type": "string", "description": "Overrides WOOCOMMERCE_CONSUMER_SECRET"},
}

POST_PROPERTIES = {
    "title": {"type": "string"},
    "content": {"type": "string"},
    "status": {"type": "string", "enum": ["publish", "future", "draft", "pending", "private"]},
}

# --- Schemas ---

def input_schema(op: Operation) -> dict:
    properties = dict(CREDENTIAL_PROPERTIES)
    required = []

    for name in op.path_params:
        properties[name] = {"type": ["integer", "string"]}
        required.append(name)

    if op.body:
        if op.body == "locations":
            body = {"type": "array", "items": {"type": "object"}}
        else:
            body = {"type": "object"}
        if op.body_fields or op.body_keys:
            body["required"] = list(op.body_fields + op.body_keys)
        properties[op.body] = body
        required.append(op.body)

    if op.paginated:
        properties["perPage"] = {"type": "integer", "default": op.per_page_default}
        properties["page"] = {"type": "integer", "default": 1}
    for param, _ in op.query:
        properties[param] = {"type": ["string", "integer"]}
    if op.filters:
        properties["filters"] = {"type": "object", "description": "Extra query parameters"}
    if op.force_default is not None:
        properties["force"] = {"type": "boolean", "default": op.force_default, "description": "True to bypass trash"}

    if op.handler in (handlers.create_post, handlers.update_post):
        properties.update(POST_PROPERTIES)
    elif op.handler is handlers.get_resource_meta:
        properties["metaKey"] = {"type": "string", "description": "Only return entries with this key"}
    elif op.handler is handlers.get_stock_report:
        properties["perPage"] = {"type": "integer", "default": 100}

    for name in op.required:
        properties.setdefault(name, {"type": "string"})
        required.append(name)
    for name in op.present:
        properties.setdefault(name, {"description": "Any JSON value, null allowed"})
        required.append(name)

    return {"type": "object", "properties": properties, "required": required}

# --- Handlers ---

async def list_tools() -> list[types.Tool]:
    return [
        types.Tool(
            name=name,
            description=f"{OPERATIONS[name].description} [{OPERATIONS[name].kind.value} API]",
            inputSchema=input_schema(OPERATIONS[name]),
        )
        for name in all_methods()
    ]

async def call_tool(name: str, arguments: dict) -> list[types.TextContent]:
    # requests is blocking, keep it off the event loop
    result = await asyncio.to_thread(handle_request, name, arguments, mcp.get_config())
    return [types.TextContent(type="text", text=json.dumps(result))]


def main():
    mcp.register_handlers(list_tools, call_tool)
    mcp.serve()


if __name__ == "__main__":
    main()
