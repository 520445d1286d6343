# app/deps.py
# Role: Shared FastAPI dependencies.
#       The ledger store is built once per app (see main.create_app) and
#       kept on app.state; routes receive it through get_store.

"""
Shared dependencies for the portfolio API.
"""

from fastapi import Request

from app.services.ledger_store import LedgerStore


def get_store(request: Request) -> LedgerStore:
    """
    FastAPI dependency returning the app's LedgerStore.

    Typical usage in routes:
        store: LedgerStore = Depends(get_store)
    """
    return request.app.state.store
