# sdk/catalog.py
import requests
import httpx
from typing import Any, Dict, Optional


class CatalogAPIError(Exception):
    def __init__(self, status_code: int, message: str, error: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.message = message
        self.error = error or {}
        super().__init__(f"HTTP {status_code}: {message}")


def _raise_for_error(r) -> None:
    if r.status_code < 400:
        return
    try:
        body = r.json()
    except ValueError:
        body = {"message": r.text}
    if not isinstance(body, dict):
        body = {"message": str(body)}
    raise CatalogAPIError(r.status_code, body.get("message", ""), body.get("error"))


class CatalogClient:
    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        api_key: Optional[str] = None,
        timeout: int = 10,
        session=None,
        api_key_header: str = "x-api-key",
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.api_key_header = api_key_header
        self.api_key = api_key
        if api_key:
            self.session.headers.update({api_key_header: api_key})

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def welcome(self) -> str:
        r = self.session.get(self._url("/"), timeout=self.timeout)
        _raise_for_error(r)
        return r.text

    # Products
    def list_products(self, category: Optional[str] = None, page: Optional[int] = None, limit: Optional[int] = None):
        params = {}
        if category:
            params["category"] = category
        if page is not None:
            params["page"] = page
        if limit is not None:
            params["limit"] = limit
        r = self.session.get(self._url("/api/products"), params=params, timeout=self.timeout)
        _raise_for_error(r)
        return r.json()

    def search_products(self, q: str = ""):
        r = self.session.get(self._url("/api/products/search"), params={"q": q}, timeout=self.timeout)
        _raise_for_error(r)
        return r.json()

    def stats(self) -> Dict[str, int]:
        r = self.session.get(self._url("/api/products/stats"), timeout=self.timeout)
        _raise_for_error(r)
        return r.json()

    def get_product(self, product_id: str):
        r = self.session.get(self._url(f"/api/products/{product_id}"), timeout=self.timeout)
        _raise_for_error(r)
        return r.json()

    def create_product(self, name: str, description: str, price: float, category: str, in_stock: bool = True):
        r = self.session.post(self._url("/api/products"), json={
            "name": name,
            "description": description,
            "price": price,
            "category": category,
            "inStock": in_stock,
        }, timeout=self.timeout)
        _raise_for_error(r)
        return r.json()

    def update_product(self, product_id: str, **fields):
        # accepts in_stock as a friendlier alias for inStock
        if "in_stock" in fields:
            fields["inStock"] = fields.pop("in_stock")
        r = self.session.put(self._url(f"/api/products/{product_id}"), json=fields, timeout=self.timeout)
        _raise_for_error(r)
        return r.json()

    def delete_product(self, product_id: str) -> None:
        r = self.session.delete(self._url(f"/api/products/{product_id}"), timeout=self.timeout)
        _raise_for_error(r)

    # Async search (example)
    async def search_products_async(self, q: str = ""):
        headers = {self.api_key_header: self.api_key} if self.api_key else {}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.get(self._url("/api/products/search"), params={"q": q}, headers=headers)
            _raise_for_error(r)
            return r.json()


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "y")


if __name__ == "__main__":
    import argparse
    import os
    from rich import print

    parser = argparse.ArgumentParser(description="Product API CLI")
    parser.add_argument("--base-url", default=os.getenv("PRODUCT_API_URL", "http://127.0.0.1:3000"))
    parser.add_argument("--api-key", default=os.getenv("API_KEY"))
    subparsers = parser.add_subparsers(dest="command", required=True)

    lp = subparsers.add_parser("list-products", help="List products")
    lp.add_argument("--category", help="Filter products by category")
    lp.add_argument("--page", type=int)
    lp.add_argument("--limit", type=int)

    sp = subparsers.add_parser("search", help="Search products by name")
    sp.add_argument("--q", default="", help="Case-insensitive name fragment")

    subparsers.add_parser("stats", help="Product counts per category")

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--product-id", required=True)

    cp = subparsers.add_parser("create-product", help="Create a new product")
    cp.add_argument("--name", required=True)
    cp.add_argument("--description", required=True)
    cp.add_argument("--price", type=float, required=True)
    cp.add_argument("--category", required=True)
    cp.add_argument("--in-stock", default="true")

    up = subparsers.add_parser("update-product", help="Update fields of a product")
    up.add_argument("--product-id", required=True)
    up.add_argument("--name")
    up.add_argument("--description")
    up.add_argument("--price", type=float)
    up.add_argument("--category")
    up.add_argument("--in-stock")

    dp = subparsers.add_parser("delete-product", help="Delete a product")
    dp.add_argument("--product-id", required=True)

    args = parser.parse_args()
    c = CatalogClient(base_url=args.base_url, api_key=args.api_key)

    try:
        if args.command == "list-products":
            print(c.list_products(args.category, args.page, args.limit))
        elif args.command == "search":
            print(c.search_products(args.q))
        elif args.command == "stats":
            print(c.stats())
        elif args.command == "get-product":
            print(c.get_product(args.product_id))
        elif args.command == "create-product":
            print(c.create_product(args.name, args.description, args.price, args.category, _parse_bool(args.in_stock)))
        elif args.command == "update-product":
            fields = {k: v for k, v in (
                ("name", args.name),
                ("description", args.description),
                ("price", args.price),
                ("category", args.category),
            ) if v is not None}
            if args.in_stock is not None:
                fields["in_stock"] = _parse_bool(args.in_stock)
            print(c.update_product(args.product_id, **fields))
        elif args.command == "delete-product":
            c.delete_product(args.product_id)
            print(f"[green]Deleted {args.product_id}[/green]")
    except CatalogAPIError as e:
        print(f"[red]{e}[/red]")
        raise SystemExit(1)
