import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bulk_feedback.api.routes_analyze import router as analyze_router
from bulk_feedback.api.routes_upload import router as upload_router
from bulk_feedback.core.errors import FeedbackError
from bulk_feedback.middleware.limits import BodySizeLimitMiddleware
from bulk_feedback.services.processor import SubmissionProcessor

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="BulkFeedback")

app.add_middleware(BodySizeLimitMiddleware)
app.state.processor = SubmissionProcessor()


@app.exception_handler(FeedbackError)
async def feedback_error_handler(request: Request, exc: FeedbackError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.get("/health")
def health():
    return {"status": "ok"}

app.include_router(analyze_router)
app.include_router(upload_router)
