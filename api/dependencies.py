"""Shared contribution store and dependency for FastAPI."""

import os
from pathlib import Path
from typing import Annotated

from fastapi import Depends, HTTPException, Request

from contribution_search.loader import ContributionStore

DATA_DIR = Path(os.environ.get("CONTRIBUTION_DATA_DIR", "data"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


def get_store(request: Request) -> ContributionStore:
    """Return the loaded store, or 503 while data is still loading."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Contribution data is still loading")
    return store


StoreDep = Annotated[ContributionStore, Depends(get_store)]
