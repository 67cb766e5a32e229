"""API routes implementation."""

import uuid

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from .schemas import (
    ApiResponse,
    CreateLinkRequest,
    LinkData,
    LinksListData,
    ReportData,
    envelope,
)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ApiResponse, "description": "Invalid request"},
    500: {"model": ApiResponse, "description": "Internal server error"},
}


@router.post(
    "/links",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[LinkData],
    response_model_exclude_none=True,
    responses={
        **ERROR_RESPONSES,
        200: {"model": ApiResponse[LinkData], "description": "A link for this URL already existed"},
        409: {"model": ApiResponse, "description": "Short code already exists"},
    },
    summary="Create short link",
    description="Create a short link. Optionally provide a custom short code. "
                "Creating a link for a URL that is already shortened returns the existing link.",
    tags=["links"],
)
async def create_link(request: Request, body: CreateLinkRequest):
    """Create a short link."""
    service = request.app.state.service

    link, created = await service.create_link(
        original_url=body.originalUrl,
        short_url=body.shortUrl,
    )

    if created:
        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content=envelope(data=link.to_dict(), message="Link created successfully"),
        )
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=envelope(data=link.to_dict(), message="Link already exists"),
    )


@router.get(
    "/links",
    response_model=ApiResponse[LinksListData],
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
    summary="List links",
    description="Paginated list of links, newest first. limit is capped at 100.",
    tags=["links"],
)
async def list_links(request: Request, page: int = 1, limit: int = 10):
    """List links."""
    service = request.app.state.service

    result = await service.list_links(page=page, limit=limit)
    result["links"] = [link.to_dict() for link in result["links"]]

    return envelope(data=result)


@router.get(
    "/links/short/{short_url}",
    response_model=ApiResponse[LinkData],
    response_model_exclude_none=True,
    responses={404: {"model": ApiResponse, "description": "Short code not found"}},
    summary="Get link by short code",
    tags=["links"],
)
async def get_link_by_short_code(request: Request, short_url: str):
    """Get a link by its short code without counting a visit."""
    service = request.app.state.service

    link = await service.get_link_by_short_code(short_url)

    return envelope(data=link.to_dict())


@router.get(
    "/links/{link_id}",
    response_model=ApiResponse[LinkData],
    response_model_exclude_none=True,
    responses={
        **ERROR_RESPONSES,
        404: {"model": ApiResponse, "description": "Link not found"},
    },
    summary="Get link by id",
    tags=["links"],
)
async def get_link(request: Request, link_id: uuid.UUID):
    """Get a link by id."""
    service = request.app.state.service

    link = await service.get_link(link_id)

    return envelope(data=link.to_dict())


@router.delete(
    "/links/{link_id}",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    responses={
        **ERROR_RESPONSES,
        404: {"model": ApiResponse, "description": "Link not found"},
    },
    summary="Delete link",
    tags=["links"],
)
async def delete_link(request: Request, link_id: uuid.UUID):
    """Delete a link."""
    service = request.app.state.service

    await service.delete_link(link_id)

    return envelope(message="Link deleted successfully")


@router.post(
    "/reports/csv",
    response_model=ApiResponse[ReportData],
    response_model_exclude_none=True,
    responses={
        404: {"model": ApiResponse, "description": "No links to report"},
        500: {"model": ApiResponse, "description": "Upload to object storage failed"},
    },
    summary="Generate CSV report",
    description="Snapshot every link to CSV, upload it to object storage and record it.",
    tags=["reports"],
)
async def generate_csv_report(request: Request):
    """Generate and upload a CSV report."""
    reports = request.app.state.reports

    report = await reports.generate_report()

    return envelope(
        data=report.to_dict(),
        message="CSV report generated and stored successfully",
    )


@router.get(
    "/reports",
    response_model=ApiResponse[list[ReportData]],
    response_model_exclude_none=True,
    summary="List reports",
    tags=["reports"],
)
async def list_reports(request: Request):
    """List generated reports, newest first."""
    reports = request.app.state.reports

    items = await reports.list_reports()

    return envelope(data=[report.to_dict() for report in items])
