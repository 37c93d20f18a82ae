"""
Analyze router for the find-unused-exports API.
"""
import logging
import os
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool

from find_unused_exports.config import FinderConfig
from find_unused_exports.core.analyzer import find_unused_exports
from find_unused_exports.core.report import UnusedExportsReport
from find_unused_exports.server.models import ErrorResponse, UnusedExportsReportModel, UnusedExportsRequest

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/unused-exports",
    response_model=UnusedExportsReportModel,
    responses={400: {"model": ErrorResponse, "description": "Invalid options or unreadable modules."}},
)
async def post_unused_exports(request: Request, options: UnusedExportsRequest) -> UnusedExportsReportModel:
    """Find unused exports in a project directory.

    Unset request fields fall back to the server config.
    """
    root = Path(request.app.state.root_path)
    config: FinderConfig = getattr(request.app.state, "config", None) or FinderConfig(project_root=root)

    cwd = options.cwd.strip("\"'") if options.cwd is not None else str(root)
    module_glob = options.module_glob if options.module_glob is not None else config.module_glob
    extensions = (
        options.resolve_file_extensions
        if options.resolve_file_extensions is not None
        else config.resolve_file_extensions
    )
    index_files = (
        options.resolve_index_files
        if options.resolve_index_files is not None
        else config.resolve_index_files
    )

    logger.info("API request to find unused exports in %s", cwd)
    # Scanning is blocking work with its own thread pool.
    result = await run_in_threadpool(
        find_unused_exports,
        cwd=cwd,
        module_glob=module_glob,
        resolve_file_extensions=extensions,
        resolve_index_files=index_files,
        max_workers=config.max_workers,
    )
    report = UnusedExportsReport.from_result(os.path.abspath(cwd), result)
    return UnusedExportsReportModel(**report.to_dict())
