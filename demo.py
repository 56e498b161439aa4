#!/usr/bin/env python
import os

from sdk.catalog import CatalogAPIError, CatalogClient


def main():
    c = CatalogClient(
        base_url=os.getenv("PRODUCT_API_URL", "http://127.0.0.1:3000"),
        api_key=os.getenv("API_KEY"),
    )

    print(c.welcome())

    # -----------------------------
    # List and filter
    # -----------------------------
    print("\nListing products...")
    print(c.list_products())
    print("\nKitchen products, one per page...")
    print(c.list_products(category="kitchen", page=1, limit=1))

    # -----------------------------
    # Search and stats
    # -----------------------------
    print("\nSearching for 'phone'...")
    print(c.search_products("phone"))
    print("\nCategory stats...")
    print(c.stats())

    # -----------------------------
    # Create, update, delete
    # -----------------------------
    print("\nCreating a product...")
    created = c.create_product("Kettle", "Electric kettle, 1.7L", 35, "kitchen", True)
    print(created)

    print("\nRepricing it...")
    print(c.update_product(created["id"], price=29.5))

    print("\nDeleting it...")
    c.delete_product(created["id"])
    try:
        c.get_product(created["id"])
    except CatalogAPIError as e:
        print(f"Lookup after delete: {e}")


if __name__ == "__main__":
    main()
