"""Template download and generation endpoints."""

import asyncio

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import ValidationError

from umt_gen.api.deps import get_catalog, get_customizer
from umt_gen.api.models import GenerateRequest, TemplateErrorDetail
from umt_gen.api.routes.versions import loaded_snapshot
from umt_gen.constants import TEMPLATE_FILENAME
from umt_gen.core.catalog import CatalogService
from umt_gen.template.customizer import TemplateCustomizer
from umt_gen.template.errors import TemplateError
from umt_gen.versions.schemas import Selection

router = APIRouter()


def _zip_response(data: bytes, filename: str) -> Response:
    return Response(
        content=data,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def _template_bytes(catalog: CatalogService) -> bytes:
    loop = asyncio.get_running_loop()
    data = await loop.run_in_executor(None, catalog.template)
    if data is None:
        raise HTTPException(
            status_code=503, detail="Template not available. Please try again later."
        )
    return data


@router.get("/template")
async def download_template(catalog: CatalogService = Depends(get_catalog)):
    """The unmodified template archive."""
    return _zip_response(await _template_bytes(catalog), TEMPLATE_FILENAME)


@router.post("/generate")
async def generate_template(
    request: GenerateRequest,
    catalog: CatalogService = Depends(get_catalog),
    customizer: TemplateCustomizer = Depends(get_customizer),
):
    """Generate a template customized for the requested mod."""
    snapshot = await loaded_snapshot(catalog)
    if not snapshot.matrix:
        raise HTTPException(
            status_code=503,
            detail="Failed to fetch compatible versions. Please try again later.",
        )

    records = []
    for version_id in request.versions:
        record = snapshot.record(version_id)
        if record is None:
            raise HTTPException(status_code=400, detail=f"Unknown Minecraft version: {version_id}")
        records.append(record)

    try:
        selection = Selection(
            mod_id=request.mod_id,
            mod_name=request.mod_name,
            package_name=request.package_name,
            loaders=request.loaders,
            versions=records,
        )
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        raise HTTPException(status_code=422, detail=errors) from e

    template = await _template_bytes(catalog)

    loop = asyncio.get_running_loop()
    try:
        artifact = await loop.run_in_executor(None, customizer.generate, template, selection)
    except TemplateError as e:
        detail = TemplateErrorDetail(kind=e.kind, message=str(e))
        raise HTTPException(status_code=422, detail=detail.model_dump()) from e

    return _zip_response(artifact.data, artifact.filename)
