import time
import uuid

from fastapi import FastAPI, Request

from dirham import __version__
from dirham.api.endpoints import imports, transactions
from dirham.common.logging_config import get_logger, set_request_id, setup_logging

# Initialize Structured Logging
setup_logging()
logger = get_logger("dirham.api.main")

app = FastAPI(title="Dirham Statements API", version=__version__)


# Middleware for Request ID and Logging
@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    set_request_id(request_id)

    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path}",
        method=request.method,
        path=request.url.path,
        client=request.client.host if request.client else "unknown",
    )

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            f"Request failed: {e}",
            error=str(e),
            process_time_ms=round((time.time() - start_time) * 1000, 2),
            exc_info=True,
        )
        raise

    logger.info(
        f"Request completed: {request.method} {request.url.path} - Status: {response.status_code}",
        status_code=response.status_code,
        process_time_ms=round((time.time() - start_time) * 1000, 2),
    )
    response.headers["X-Request-ID"] = request_id
    return response


# Include Routers
app.include_router(imports.router, prefix="/api/import", tags=["Import"])
app.include_router(transactions.router, prefix="/api", tags=["Transactions"])


@app.get("/api/health")
def health_check():
    return {"status": "ok", "app": "dirham", "version": __version__}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8010)
