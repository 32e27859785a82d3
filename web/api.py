"""
Email Reputation Web API
FastAPI host for the email-reputation lookup integration
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

# Add parent to path for email_reputation imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from email_reputation import BatchLookupError, ConfigurationError
from email_reputation.config import INTEGRATION_INFO
from email_reputation.integration import get_integration

app = FastAPI(
    title="Email Reputation",
    description="EmailRep lookups with blocklist suppression",
    version="1.0.0",
)


class Entity(BaseModel):
    value: str
    type: Optional[str] = "email"


class LookupRequest(BaseModel):
    entities: list[Entity]
    options: dict[str, Any]


class ValidateRequest(BaseModel):
    options: dict[str, Any]


@app.get("/api/health")
async def health():
    """Health check endpoint"""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/api/info")
async def info():
    """Integration metadata and option descriptors"""
    return INTEGRATION_INFO


@app.post("/api/lookup")
def lookup(request: LookupRequest):
    """Look up a batch of entities"""
    entities = [e.model_dump() for e in request.entities]
    try:
        results = get_integration().lookup(entities, request.options)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=e.to_dict()) from e
    except BatchLookupError as e:
        raise HTTPException(status_code=502, detail=e.to_dict()) from e

    return {"results": results}


@app.post("/api/validate")
async def validate(request: ValidateRequest):
    """Validate user options; returns one error per invalid field"""
    return {"errors": get_integration().validate_options(request.options)}


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
