'''
Code Breakers API

Endpoints:
GET  /health                   -> liveness probe
POST /games                    -> start a game
GET  /games/{id}               -> read state & history
POST /games/{id}/guesses       -> submit a guess

Every game belongs to the owner id sent in the X-Consumer-ID header (configurable).
Games of other owners look exactly like games that do not exist.
Errors come back as {"code": ..., "message": ...}.
'''

import logging
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config
from .random_client import get_secret_factory
from .schemas import ErrorOut, GameOut, GuessRequest, GuessResultOut, HealthOut
from .store import GameNotFoundError, GameStore, GameStoreError

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


class UnauthorizedError(GameStoreError):
    code = "unauthorized"
    status_code = 401

    def __init__(self) -> None:
        super().__init__("Missing or invalid credentials.")


app = FastAPI(title="Code Breakers API", version="1.0.0")

# credentials cannot be combined with a wildcard origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials="*" not in config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One store per process; games live as long as the process does
store = GameStore(rules=config.GAME_RULES, secret_factory=get_secret_factory(config.SECRET_SOURCE))
logger.info(
    "code breakers ready (env=%s, secret source=%s, require auth=%s)",
    config.APP_ENV, config.SECRET_SOURCE, config.REQUIRE_AUTH,
)


def get_store() -> GameStore:
    return store


def get_owner_id(request: Request) -> str:
    owner_id = request.headers.get(config.OWNER_HEADER)
    if not owner_id:
        if config.REQUIRE_AUTH:
            raise UnauthorizedError()
        return config.ANONYMOUS_OWNER
    return owner_id


def _parse_game_id(raw: str) -> int:
    # Only plain ASCII digits name a game; int() alone would accept "0_1" or fullwidth digits
    if not (raw.isascii() and raw.isdigit()):
        raise GameNotFoundError()
    return int(raw)


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorOut(code=code, message=message).model_dump())


# ---------------- Error handlers ----------------

@app.exception_handler(GameStoreError)
async def handle_store_error(request: Request, exc: GameStoreError) -> JSONResponse:
    return _error(exc.status_code, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    # The only request body is the guess, so a malformed body is a malformed guess
    return _error(422, "invalid_guess", "Request body must be a JSON object with a string 'guess'.")


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unexpected error on %s %s", request.method, request.url.path)
    return _error(500, "internal_error", "Unexpected server error.")


# ---------------- Routes ----------------

@app.get("/health", response_model=HealthOut, summary="Liveness probe")
def health() -> HealthOut:
    return HealthOut()


@app.post(
    "/games",
    status_code=201,
    response_model=GameOut,
    response_model_exclude_none=True,
    summary="Start a new game",
)
def create_game(
    owner_id: str = Depends(get_owner_id),
    store: GameStore = Depends(get_store),
) -> GameOut:
    return GameOut.model_validate(store.create(owner_id))


@app.get(
    "/games/{game_id}",
    response_model=GameOut,
    response_model_exclude_none=True,
    responses={404: {"model": ErrorOut}},
    summary="Get current game state",
)
def get_game(
    game_id: str,
    owner_id: str = Depends(get_owner_id),
    store: GameStore = Depends(get_store),
) -> GameOut:
    view = store.get(_parse_game_id(game_id), owner_id)
    if view is None:
        raise GameNotFoundError()
    return GameOut.model_validate(view)


@app.post(
    "/games/{game_id}/guesses",
    status_code=201,
    response_model=GuessResultOut,
    responses={404: {"model": ErrorOut}, 409: {"model": ErrorOut}, 422: {"model": ErrorOut}},
    summary="Submit a guess",
)
def submit_guess(
    game_id: str,
    payload: Optional[GuessRequest] = None,
    owner_id: str = Depends(get_owner_id),
    store: GameStore = Depends(get_store),
) -> GuessResultOut:
    # store.guess() validates the guess, scores it and moves the game along
    guess = payload.guess if payload is not None else ""
    result = store.guess(_parse_game_id(game_id), owner_id, guess)
    return GuessResultOut.model_validate(result)


# ---- Static hosting for a built frontend ----

class SPAStaticFiles(StaticFiles):
    """
    Serve index.html for unknown GET paths so client-side routes survive a reload.
    Any other method gets the usual JSON not_found body.
    """

    async def get_response(self, path: str, scope):
        if scope["method"] not in ("GET", "HEAD"):
            return _error(404, "not_found", "Resource not found.")
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404:
                raise
            return FileResponse(Path(self.directory) / "index.html")


if config.SERVE_STATIC:
    dist_path = Path(config.FRONTEND_DIST).resolve()
    app.mount("/", SPAStaticFiles(directory=str(dist_path), html=True), name="static")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())
