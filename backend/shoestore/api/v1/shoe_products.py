"""
Shoe Product Catalog Endpoints

Bodies are read as raw JSON and validated by the catalog rule-set, so every
violation is reported together instead of the first one FastAPI finds.
"""

import json
from typing import Any

from fastapi import APIRouter, Request, Response, status

from shoestore.core.exceptions import MalformedBodyError
from shoestore.services import ListParams, shoe_product_service

router = APIRouter(prefix="/shoe-products", tags=["shoe-products"])


async def read_json_body(request: Request) -> Any:
    """Parse the request body as JSON, rejecting anything unparseable"""
    raw = await request.body()
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedBodyError(str(e)) from e


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_shoe_product(request: Request):
    """Create a shoe product; the identifier is generated server side"""
    body = await read_json_body(request)
    product = await shoe_product_service.create_product(body)
    return {"data": product.to_response()}


@router.get("")
async def list_shoe_products(request: Request):
    """
    List or search shoe products

    Query parameters: query, pageSize, nextPageKey (or page), sortBy,
    sortOrder, excludeFields
    """
    params = ListParams.from_query(request.query_params)
    return await shoe_product_service.list_products(params)


@router.get("/{shoe_product_id}")
async def get_shoe_product(shoe_product_id: str):
    product = await shoe_product_service.get_product(shoe_product_id)
    return {"data": product.to_response()}


@router.put("/{shoe_product_id}")
async def update_shoe_product(shoe_product_id: str, request: Request):
    """Replace an existing shoe product; unknown identifiers are never created"""
    body = await read_json_body(request)
    product = await shoe_product_service.update_product(shoe_product_id, body)
    return {"data": product.to_response()}


@router.delete("/{shoe_product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_shoe_product(shoe_product_id: str):
    await shoe_product_service.delete_product(shoe_product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
