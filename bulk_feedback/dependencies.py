from fastapi import Request

from bulk_feedback.services.processor import SubmissionProcessor


def get_processor(request: Request) -> SubmissionProcessor:
    return request.app.state.processor
