# main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pymongo.errors import PyMongoError

from campusvote import __version__
from campusvote.config import CORS_ORIGINS, LOG_LEVEL
from campusvote.errors import VotingError
from campusvote.routes.auth_routes import router as auth_router
from campusvote.routes.candidate_routes import router as candidate_router
from campusvote.routes.dashboard_routes import router as dashboard_router
from campusvote.routes.election_routes import router as election_router
from campusvote.routes.vote_routes import vote_router

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Campus Vote API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==============================================================================
# ERROR HANDLERS: every failure is answered as {"kind": ..., "message": ...}
# ==============================================================================

@app.exception_handler(VotingError)
async def voting_error_handler(request: Request, exc: VotingError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return JSONResponse(
        status_code=422,
        content={"kind": "ValidationError", "message": "; ".join(problems)},
    )


@app.exception_handler(PyMongoError)
async def database_error_handler(request: Request, exc: PyMongoError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"kind": "InternalError", "message": "Internal Server Error"},
    )


app.include_router(auth_router)
app.include_router(election_router)
app.include_router(candidate_router)
app.include_router(vote_router)
app.include_router(dashboard_router)


@app.get("/health", tags=["General"])
def health_check():
    return {"status": "healthy", "database": "MongoDB"}


@app.get("/", tags=["General"])
def read_root():
    return {"message": "Campus Vote API is running"}


@app.get("/favicon.ico", include_in_schema=False)
def favicon():
    return Response(status_code=204)
