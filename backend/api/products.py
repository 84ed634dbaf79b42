"""
Product API endpoints
"""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
import logging

from constants import HTTPStatus, ResponseMessages
from dependencies import get_create_product_handler, get_product_by_id_handler
from dtos.internal.product_messages import ProductGetByIdQuery
from dtos.request.product_request import CreateProductRequest
from dtos.response.api_response import ApiResponse
from dtos.response.product_response import ProductResponse
from services.product_handlers import CreateProductHandler, GetProductByIdHandler
from utils.error_handlers import handle_api_errors

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/product/{product_id}", response_model=ProductResponse)
@handle_api_errors("Get product")
def get_product(
    product_id: UUID,
    handler: GetProductByIdHandler = Depends(get_product_by_id_handler)
):
    """
    Get a product by id

    Args:
        product_id: Product UUID

    Returns:
        Product details; 404 if the product does not exist or was deleted
    """
    product = handler.handle(ProductGetByIdQuery(product_id=str(product_id)))
    if product is None:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=ResponseMessages.PRODUCT_NOT_FOUND)
    return product


@router.post("/product", response_model=ApiResponse[str])
@handle_api_errors("Create product")
def create_product(
    request: CreateProductRequest,
    handler: CreateProductHandler = Depends(get_create_product_handler)
):
    """
    Create a product

    Returns:
        Envelope with the generated product id; 400 envelope with field
        errors if the values are invalid
    """
    product_id = handler.handle(request.to_command())
    return ApiResponse[str].ok(product_id, ResponseMessages.PRODUCT_CREATED)
