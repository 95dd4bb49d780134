"""
HTTP surface for ParallelID.

Public reads of credential state plus the self-mint submission
endpoint. Authority operations are not exposed over HTTP.

Run with:
    uvicorn parallelid.api:create_app --factory
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import config
from .errors import ErrorCode, ParallelIDError
from .logging_config import configure_logging, set_request_id
from .models import (
    CredentialView,
    OwnerCredentials,
    SanctionsView,
    SelfMintRequest,
    SelfMintResponse,
    SelfMintTerms,
    TraitView,
)
from .registry import ParallelIDRegistry
from .signing import MintAuthorization

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.UNAUTHORIZED: 403,
    ErrorCode.INVALID_SIGNATURE: 403,
    ErrorCode.SIGNATURE_EXPIRED: 403,
    ErrorCode.INSUFFICIENT_PAYMENT: 402,
}


def create_app(registry: Optional[ParallelIDRegistry] = None) -> FastAPI:
    """Build the API around a registry; without one, build it from config."""
    if registry is None:
        configure_logging(
            level="DEBUG" if config.is_debug() else config.LOG_LEVEL,
            json_format=config.LOG_JSON
        )
        for setting, ok in config.validate_config().items():
            if not ok:
                logger.warning("Configuration setting unusable: %s", setting)
        registry = ParallelIDRegistry.from_config()

    docs_url = None if config.is_production() else "/docs"
    app = FastAPI(title="ParallelID", docs_url=docs_url, redoc_url=None)
    app.state.registry = registry

    @app.middleware("http")
    async def _request_id(request: Request, call_next):
        request_id = set_request_id(request.headers.get("x-request-id"))
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response

    @app.exception_handler(ParallelIDError)
    async def _parallelid_error(request: Request, exc: ParallelIDError):
        return JSONResponse(status_code=STATUS_BY_CODE[exc.code], content={"detail": exc.code.value})

    @app.exception_handler(ValueError)
    async def _value_error(request: Request, exc: ValueError):
        return JSONResponse(status_code=422, content={"detail": "INVALID_ARGUMENT", "message": str(exc)})

    @app.get("/health")
    def health():
        return {"status": "ok", "total_supply": registry.total_supply()}

    @app.get("/self_mint/terms", response_model=SelfMintTerms)
    def self_mint_terms():
        return SelfMintTerms(
            authority=registry.authority,
            registry_address=registry.registry_address,
            chain_id=registry.chain_id,
            next_sequence=registry.next_sequence,
            mint_cost=registry.mint_cost
        )

    @app.post("/self_mint", response_model=SelfMintResponse)
    def self_mint(req: SelfMintRequest):
        authorization = MintAuthorization.from_dict(req.authorization.model_dump())
        token_id = registry.self_mint(req.caller, authorization, value=req.value)
        return SelfMintResponse(token_id=token_id, owner=registry.owner_of(token_id))

    @app.get("/credentials/{token_id}", response_model=CredentialView)
    def get_credential(token_id: int):
        record = registry.record(token_id)
        data = record.to_dict()
        data.update(
            owner=registry.owner_of(token_id),
            sanctions_monitored=registry.is_sanctions_monitored(token_id),
            sanctions_safe=registry.is_sanctions_safe(token_id),
            monitored_until=registry.monitor.monitored_until(record)
        )
        return CredentialView(**data)

    @app.get("/credentials/{token_id}/traits/{name}", response_model=TraitView)
    def get_trait(token_id: int, name: str):
        return TraitView(token_id=token_id, trait=name, present=registry.has_trait(token_id, name))

    @app.get("/credentials/{token_id}/sanctions", response_model=SanctionsView)
    def get_sanctions(token_id: int, jurisdiction: Optional[int] = None):
        view = SanctionsView(
            token_id=token_id,
            monitored=registry.is_sanctions_monitored(token_id),
            safe=registry.is_sanctions_safe(token_id),
            jurisdiction=jurisdiction
        )
        if jurisdiction is not None:
            view.safe_in = registry.is_sanctions_safe_in(token_id, jurisdiction)
        return view

    @app.get("/owners/{address}/credentials", response_model=OwnerCredentials)
    def get_owner_credentials(address: str):
        token_ids = registry.tokens_of_owner(address)
        return OwnerCredentials(owner=address.lower(), balance=len(token_ids), token_ids=token_ids)

    return app
