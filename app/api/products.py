from fastapi import APIRouter, Depends, Request
from typing import List, Optional
from app.core.generation import DescriptionGenerator
from app.core.product_service import ProductService
from app.core.rate_limiter import generation_rate_limit, limiter, products_rate_limit
from app.db.database import QueryGateway, get_gateway
from app.db.repository import ProductRepository
from app.models.schemas import ErrorResponse, MessageResponse, Product, ProductCreate, ProductUpdate

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_generator(request: Request) -> DescriptionGenerator:
    return request.app.state.generator


def get_product_service(
    gateway: QueryGateway = Depends(get_gateway),
    generator: DescriptionGenerator = Depends(get_generator),
) -> ProductService:
    return ProductService(ProductRepository(gateway), generator)


@router.post("", response_model=Product, status_code=201, responses=ERROR_RESPONSES, include_in_schema=False)
@router.post("/", response_model=Product, status_code=201, responses=ERROR_RESPONSES)
@limiter.limit(products_rate_limit)
def create_product(
    request: Request,
    product: ProductCreate,
    service: ProductService = Depends(get_product_service)
):
    """
    Create a product from name and attributes
    """
    return service.create_product(product.name, product.attributes)


@router.get("", response_model=List[Product], include_in_schema=False)
@router.get("/", response_model=List[Product])
@limiter.limit(products_rate_limit)
def get_products(
    request: Request,
    service: ProductService = Depends(get_product_service)
):
    """
    Get all products, newest first
    """
    return service.list_products()


@router.get("/{product_id}", response_model=Product, responses=ERROR_RESPONSES)
@limiter.limit(products_rate_limit)
def get_product(
    request: Request,
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    """
    Get product by ID
    """
    return service.get_product(product_id)


@router.put("/{product_id}", response_model=Product, responses=ERROR_RESPONSES)
@limiter.limit(products_rate_limit)
def update_product(
    request: Request,
    product_id: int,
    update: Optional[ProductUpdate] = None,
    service: ProductService = Depends(get_product_service)
):
    """
    Set the product description
    """
    return service.update_description(product_id, update.description if update else None)


@router.delete("/{product_id}", response_model=MessageResponse, responses=ERROR_RESPONSES)
@limiter.limit(products_rate_limit)
def delete_product(
    request: Request,
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    """
    Delete product by ID
    """
    service.delete_product(product_id)
    return MessageResponse(message="Product successfully deleted")


@router.post("/{product_id}/generate-description", response_model=Product, responses=ERROR_RESPONSES)
@limiter.limit(generation_rate_limit)
def generate_description(
    request: Request,
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    """
    Generate an AI description for the product and save it
    """
    return service.generate_description(product_id)
