from typing import Any, Dict, List, Optional
from app.db.database import QueryGateway

PRODUCT_COLUMNS = "id, name, attributes, description, created_at"


class ProductRepository:
    """SQL for product operations. All request values go through bind parameters."""

    def __init__(self, gateway: QueryGateway):
        self.gateway = gateway

    def create_product(self, name: str, attributes: str) -> Dict[str, Any]:
        rows = self.gateway.query(
            f"INSERT INTO products (name, attributes) VALUES (:name, :attributes) RETURNING {PRODUCT_COLUMNS}",
            {"name": name, "attributes": attributes},
        )
        return rows[0]

    def get_products(self) -> List[Dict[str, Any]]:
        """Newest first"""
        return self.gateway.query(f"SELECT {PRODUCT_COLUMNS} FROM products ORDER BY id DESC")

    def get_product(self, product_id: int) -> Optional[Dict[str, Any]]:
        rows = self.gateway.query(
            f"SELECT {PRODUCT_COLUMNS} FROM products WHERE id = :id",
            {"id": product_id},
        )
        return rows[0] if rows else None

    def update_description(self, product_id: int, description: Optional[str]) -> Optional[Dict[str, Any]]:
        rows = self.gateway.query(
            f"UPDATE products SET description = :description WHERE id = :id RETURNING {PRODUCT_COLUMNS}",
            {"description": description, "id": product_id},
        )
        return rows[0] if rows else None

    def delete_product(self, product_id: int) -> bool:
        rows = self.gateway.query(
            "DELETE FROM products WHERE id = :id RETURNING id",
            {"id": product_id},
        )
        return bool(rows)

    def count_products(self) -> int:
        rows = self.gateway.query("SELECT COUNT(*) AS total FROM products")
        return int(rows[0]["total"])
