"""Resource helpers for products, orders, customers and B2BKing data.

Each helper is a thin call through ``WooProxyClient.request``; payloads are
WooCommerce's own JSON and errors propagate as the client raised them.
"""

from typing import Any

from .client import WooProxyClient

JSON = dict[str, Any]


async def list_products(
    client: WooProxyClient,
    page: int = 1,
    per_page: int = 10,
    category: int | None = None,
    search: str | None = None,
) -> list[JSON]:
    params = {"page": page, "per_page": per_page, "category": category, "search": search}
    return await client.request("products", params=params)


async def get_product(client: WooProxyClient, product_id: int) -> JSON:
    return await client.request(f"products/{product_id}")


async def get_product_variations(client: WooProxyClient, product_id: int) -> list[JSON]:
    return await client.request(f"products/{product_id}/variations")


async def update_product(client: WooProxyClient, product_id: int, changes: JSON) -> JSON:
    return await client.request(f"products/{product_id}", method="PUT", data=changes)


async def list_orders(
    client: WooProxyClient,
    page: int = 1,
    per_page: int = 10,
    status: str | None = None,
    customer: int | None = None,
) -> list[JSON]:
    params = {"page": page, "per_page": per_page, "status": status, "customer": customer}
    return await client.request("orders", params=params)


async def get_order(client: WooProxyClient, order_id: int) -> JSON:
    return await client.request(f"orders/{order_id}")


async def create_order(client: WooProxyClient, order: JSON) -> JSON:
    return await client.request("orders", method="POST", data=order)


async def update_order(client: WooProxyClient, order_id: int, changes: JSON) -> JSON:
    return await client.request(f"orders/{order_id}", method="PUT", data=changes)


async def list_customers(client: WooProxyClient, page: int = 1, per_page: int = 10) -> list[JSON]:
    return await client.request("customers", params={"page": page, "per_page": per_page})


async def get_customer(client: WooProxyClient, customer_id: int) -> JSON:
    return await client.request(f"customers/{customer_id}")


async def get_customer_by_email(client: WooProxyClient, email: str) -> JSON | None:
    """First customer registered with ``email``, or None."""
    customers = await client.request("customers", params={"email": email})
    if not customers:
        return None
    return customers[0]


async def create_customer(client: WooProxyClient, customer: JSON) -> JSON:
    return await client.request("customers", method="POST", data=customer)


async def update_customer(client: WooProxyClient, customer_id: int, changes: JSON) -> JSON:
    return await client.request(f"customers/{customer_id}", method="PUT", data=changes)


async def delete_customer(client: WooProxyClient, customer_id: int, force: bool = True) -> JSON:
    # WooCommerce refuses to trash customers, so deletion must be forced
    return await client.request(f"customers/{customer_id}", method="DELETE", data={"force": force})


async def list_b2bking_groups(client: WooProxyClient) -> list[JSON]:
    return await client.request("b2bking/groups")


async def get_b2bking_group(client: WooProxyClient, group_id: int) -> JSON:
    return await client.request(f"b2bking/groups/{group_id}")


async def list_b2bking_users(client: WooProxyClient) -> list[JSON]:
    return await client.request("b2bking/users")


async def get_b2bking_user(client: WooProxyClient, user_id: int) -> JSON:
    return await client.request(f"b2bking/users/{user_id}")


async def list_b2bking_rules(client: WooProxyClient, rule_type: str | None = None) -> list[JSON]:
    return await client.request("b2bking/rules", params={"type": rule_type})
