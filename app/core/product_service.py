import time
from typing import Any, Dict, List, Optional
from app.core.errors import GenerationError, NotFoundError, ValidationError
from app.core.generation import DescriptionGenerator
from app.core.logging import get_logger
from app.core.metrics import record_generation
from app.db.repository import ProductRepository

logger = get_logger(__name__)

REQUIRED_FIELDS_MESSAGE = "Name and attributes are required"


class ProductService:
    """Product lifecycle on top of the repository and the description generator.

    Methods return plain rows and raise ``InventoryError`` subclasses; turning
    those into HTTP responses happens at the API boundary.
    """

    def __init__(self, repository: ProductRepository, generator: DescriptionGenerator):
        self.repository = repository
        self.generator = generator

    def create_product(self, name: Optional[str], attributes: Optional[str]) -> Dict[str, Any]:
        if not _present(name) or not _present(attributes):
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)

        product = self.repository.create_product(name, attributes)
        logger.info("Product created", product_id=product["id"])
        return product

    def list_products(self) -> List[Dict[str, Any]]:
        return self.repository.get_products()

    def get_product(self, product_id: int) -> Dict[str, Any]:
        product = self.repository.get_product(product_id)
        if product is None:
            raise NotFoundError()
        return product

    def update_description(self, product_id: int, description: Optional[str]) -> Dict[str, Any]:
        product = self.repository.update_description(product_id, description)
        if product is None:
            raise NotFoundError()
        return product

    def delete_product(self, product_id: int) -> None:
        if not self.repository.delete_product(product_id):
            raise NotFoundError()
        logger.info("Product deleted", product_id=product_id)

    def generate_description(self, product_id: int) -> Dict[str, Any]:
        """Generate copy for a stored product and save it.

        The store is only written after the generator succeeds, so a failed
        generation leaves any previous description in place.
        """
        product = self.get_product(product_id)

        logger.info("Calling description generator", product_id=product_id, product=product["name"])
        started = time.time()
        try:
            description = self.generator.generate(product["name"], product["attributes"])
        except GenerationError:
            record_generation("error", time.time() - started)
            raise
        record_generation("success", time.time() - started)

        return self.update_description(product_id, description)


def _present(value: Optional[str]) -> bool:
    return isinstance(value, str) and value != ""
