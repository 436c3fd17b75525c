from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from bulk_feedback.core.config import ALLOWED_EXTENSIONS
from bulk_feedback.core.errors import UnknownDimensionError
from bulk_feedback.dependencies import get_processor
from bulk_feedback.models.report import AnalyzeRequest, BatchResponse, ProcessingOptions
from bulk_feedback.services.dimensions import Dimension
from bulk_feedback.services.processor import SubmissionProcessor
from bulk_feedback.services.summary import summarize_batch

router = APIRouter(tags=["analyze"])


async def run_batch(processor: SubmissionProcessor, files: list, options: ProcessingOptions) -> dict:
    """Shared by /analyze and /upload: process, summarise, serialise."""
    if not files:
        raise HTTPException(status_code=400, detail="No files provided")
    try:
        results = await run_in_threadpool(processor.process_batch, files, options)
    except UnknownDimensionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    response = BatchResponse(
        processed_count=len(results),
        results=results,
        summary=summarize_batch(results),
    )
    return response.model_dump(by_alias=True)


@router.post("/analyze")
async def analyze(body: AnalyzeRequest, processor: SubmissionProcessor = Depends(get_processor)):
    options = ProcessingOptions(
        assignment_type=body.assignment_type,
        evaluation_criteria=body.evaluation_criteria,
    )
    return await run_batch(processor, body.files, options)


@router.get("/supported-types")
def supported_types(processor: SubmissionProcessor = Depends(get_processor)):
    return {
        "assignmentTypes": processor.analyzer.supported_types,
        "fileExtensions": sorted(ALLOWED_EXTENSIONS),
        "evaluationDimensions": [d.value for d in Dimension],
    }
