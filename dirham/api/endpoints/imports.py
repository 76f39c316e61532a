from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from dirham.api.state import AppState, get_state
from dirham.common.logging_config import get_logger
from dirham.parsing.exceptions import DecodeTimeout, FatalStatementError, InputTooLarge

logger = get_logger(__name__)
router = APIRouter()

STATUS_BY_ERROR = {
    InputTooLarge: 413,
    DecodeTimeout: 408,
}


def error_status(error: FatalStatementError) -> int:
    for error_type, status in STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            return status
    return 422


@router.post("")
def import_statement(file: UploadFile = File(...), state: AppState = Depends(get_state)):
    """
    Import one statement PDF into the transaction store.

    Runs in the threadpool: parsing is synchronous and bounded by the pipeline's
    own timeouts.
    """
    limit = state.settings.max_input_bytes
    # One byte past the limit is enough to reject oversize uploads
    data = file.file.read(limit + 1)
    logger.info(f"Statement upload started: {file.filename}", size=len(data))

    try:
        with state.lock:
            summary = state.importer.import_bytes(data, filename=file.filename)
    except FatalStatementError as e:
        status = error_status(e)
        logger.warning(f"Statement import rejected: {e.message}", error=e.code, status_code=status)
        raise HTTPException(status_code=status, detail={"error": e.code, "message": e.message})

    return summary.to_dict()
