from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from deck_server.card_utils.deck_mutator import DeckOperation
from deck_server.config import Settings, load_settings
from deck_server.deck_service import DeckService
from deck_server.errors import DeckServerError, StorageError, Unavailable
from deck_server.server_classes import AddCardRequest, RemoveCardRequest, UpdateCardRequest
from deck_server.utils.deck_store import DeckStore, create_deck_store
from deck_server.utils.reference_data import ReferenceDataProxy

# logging stuff
from server_logs.endpoints import router as logs_router
from server_logs.loggers import server_logger
from server_logs.middleware import RequestLoggingMiddleware


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    loc = [part for part in first.get("loc", ()) if part != "body"]
    # undecodable JSON reports its byte offset as the location
    if first.get("type") == "json_invalid" or all(isinstance(part, int) for part in loc):
        field = "body"
    else:
        field = ".".join(str(part) for part in loc)
    return f"{field}: {first.get('msg', 'invalid value')}"


def register_error_handlers(app: FastAPI):
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = _first_validation_message(exc)
        server_logger.warning("request_validation_failed", path=request.url.path, error=message)
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(DeckServerError)
    async def deck_server_error_handler(request: Request, exc: DeckServerError):
        if isinstance(exc, (StorageError, Unavailable)):
            server_logger.error(
                "request_backend_failed",
                path=request.url.path,
                error_type=type(exc).__name__,
                error=exc.message
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def register_routes(app: FastAPI):

    def deck_service(request: Request) -> DeckService:
        return request.app.state.deck_service

    def reference(request: Request) -> ReferenceDataProxy:
        return request.app.state.reference

    # --- reference data ---

    @app.get("/api/oracle-cards")
    def get_oracle_cards(request: Request):
        return JSONResponse(status_code=200, content=reference(request).get_catalog())

    @app.get("/api/featured-decks")
    def get_featured_decks(request: Request):
        return JSONResponse(status_code=200, content=reference(request).get_featured_decks())

    # --- decks ---

    @app.get("/api/decks/{deck_id}")
    def get_deck(deck_id: str, request: Request):
        return JSONResponse(status_code=200, content=deck_service(request).get_deck(deck_id))

    def _mutate(request: Request, deck_id: str, operation: DeckOperation, body) -> JSONResponse:
        payload = body.model_dump(exclude_unset=True)
        server_logger.info(
            "deck_mutation_requested",
            deck_id=deck_id,
            operation=operation.value,
            name=body.name,
            type=body.type
        )
        deck = deck_service(request).apply(deck_id, operation, payload)
        return JSONResponse(status_code=200, content={"success": True, "deck": deck})

    @app.post("/api/decks/{deck_id}/add-card")
    def add_card(deck_id: str, card: AddCardRequest, request: Request):
        return _mutate(request, deck_id, DeckOperation.ADD, card)

    @app.post("/api/decks/{deck_id}/remove-card")
    def remove_card(deck_id: str, card: RemoveCardRequest, request: Request):
        return _mutate(request, deck_id, DeckOperation.REMOVE, card)

    @app.put("/api/decks/{deck_id}/update-card")
    def update_card(deck_id: str, card: UpdateCardRequest, request: Request):
        return _mutate(request, deck_id, DeckOperation.UPDATE, card)

    @app.delete("/api/decks/{deck_id}/delete-card")
    def delete_card(deck_id: str, card: RemoveCardRequest, request: Request):
        return _mutate(request, deck_id, DeckOperation.DELETE, card)


def register_spa(app: FastAPI, static_dir: Path):
    """Serve files from the front-end build; any other path gets index.html."""
    static_root = Path(static_dir).resolve()

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_spa(full_path: str):
        if full_path:
            candidate = (static_root / full_path).resolve()
            if candidate.is_relative_to(static_root) and candidate.is_file():
                return FileResponse(candidate)

        index = static_root / "index.html"
        if not index.is_file():
            return JSONResponse(status_code=404, content={"error": "Front end not installed"})
        return FileResponse(index)


def create_app(settings: Optional[Settings] = None,
               store: Optional[DeckStore] = None,
               reference: Optional[ReferenceDataProxy] = None) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(title="Deck Server")
    app.state.settings = settings
    app.state.deck_service = DeckService(store or create_deck_store(settings))
    app.state.reference = reference or ReferenceDataProxy(
        settings.oracle_cards_source,
        settings.featured_decks_source,
        timeout=settings.reference_timeout,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware, logger=server_logger)

    register_error_handlers(app)
    register_routes(app)
    app.include_router(logs_router)
    # catch-all, must come last
    register_spa(app, settings.static_dir)

    server_logger.info(
        "app_created",
        env=settings.env,
        deck_store=settings.deck_store if store is None else type(store).__name__,
        static_dir=str(settings.static_dir)
    )
    return app


app = create_app()


def main():
    import uvicorn
    settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
