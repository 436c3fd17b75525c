from typing import List

from fastapi import APIRouter, Depends, File, Form, UploadFile

from bulk_feedback.api.routes_analyze import run_batch
from bulk_feedback.dependencies import get_processor
from bulk_feedback.models.report import ProcessingOptions, SubmissionFile
from bulk_feedback.services.processor import SubmissionProcessor

router = APIRouter(tags=["upload"])


def _parse_criteria(raw: str) -> List[str]:
    return [c.strip() for c in raw.split(",") if c.strip()]


@router.post("/upload")
async def upload(
    files: List[UploadFile] = File(...),
    assignment_type: str = Form("essay", alias="assignmentType"),
    evaluation_criteria: str = Form("", alias="evaluationCriteria"),
    processor: SubmissionProcessor = Depends(get_processor),
):
    # text is pulled out of the bytes by the processor, per file
    submissions = [
        SubmissionFile(name=f.filename or "upload", data=await f.read())
        for f in files
    ]
    options = ProcessingOptions(
        assignment_type=assignment_type,
        evaluation_criteria=_parse_criteria(evaluation_criteria),
    )
    return await run_batch(processor, submissions, options)
