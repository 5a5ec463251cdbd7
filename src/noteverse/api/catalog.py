"""Branch and year pickers."""

from typing import List

from fastapi import APIRouter

from ..core.schemas.notes import CatalogEntry, branch_catalog, year_catalog

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/branches", response_model=List[CatalogEntry])
async def list_branches():
    return branch_catalog()


@router.get("/years", response_model=List[CatalogEntry])
async def list_years():
    return year_catalog()
