"""
Labels Router - product and test labels (ticket labels live under /tickets)
"""

from fastapi import APIRouter, Response

from ...integrations.labels import ProductLabel, render_product_label, render_test_label
from ..schemas import ProductLabelRequest

router = APIRouter()

ESC_POS_MEDIA_TYPE = "application/octet-stream"


@router.post("/product")
async def product_label(body: ProductLabelRequest):
    label = ProductLabel(
        product_name=body.product_name,
        specifications=body.specifications,
        price=body.price,
    )
    return Response(content=render_product_label(label), media_type=ESC_POS_MEDIA_TYPE)


@router.get("/test")
async def test_label():
    return Response(content=render_test_label(), media_type=ESC_POS_MEDIA_TYPE)
