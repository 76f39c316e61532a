from fastapi import APIRouter, Depends

from dirham.api.state import AppState, get_state

router = APIRouter()


@router.get("/transactions")
def list_transactions(state: AppState = Depends(get_state)):
    records = state.store.list()
    return {"count": len(records), "transactions": [r.to_dict() for r in records]}


@router.delete("/transactions")
def clear_transactions(state: AppState = Depends(get_state)):
    """
    Clears every stored transaction and the statement history.
    """
    with state.lock:
        state.importer.clear()
    return {"message": "All transactions and statements were cleared."}


@router.get("/statements")
def list_statements(state: AppState = Depends(get_state)):
    statements = state.store.list_statements()
    return {"count": len(statements), "statements": [s.to_dict() for s in statements]}
