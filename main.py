import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

from fastapi import Depends, FastAPI, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from animals import AnimalService
from auth import TokenVerifier
from config import get_settings
from errors import AnimalServiceError
from observability import setup_logging
from schemas import Animal
from storage import JsonFileStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info("Animal registry starting", extra={"path": settings.data_dir})
    yield


app = FastAPI(title="Animal Registry API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AnimalServiceError)
async def service_error_handler(request: Request, exc: AnimalServiceError):
    logger.error(
        f"{type(exc).__name__}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


@app.exception_handler(Exception)
async def generic_error_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}", exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"error": {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"}},
    )


def get_store() -> JsonFileStore:
    return JsonFileStore(get_settings().data_dir)


def get_service(store: JsonFileStore = Depends(get_store)) -> AnimalService:
    settings = get_settings()
    return AnimalService(store, TokenVerifier(settings.auth_secret), settings.animals_collection)


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


@app.get("/")
def read_root():
    return {"message": "Animal Registry Backend is running"}


@app.get("/test")
def test_storage(store: JsonFileStore = Depends(get_store)):
    settings = get_settings()
    collection_dir = Path(store.base_dir) / settings.animals_collection
    return {
        "backend": "running",
        "data_dir": str(store.base_dir),
        "collection": settings.animals_collection,
        "collection_exists": collection_dir.is_dir(),
        "records": store.count_records(settings.animals_collection),
    }


@app.post("/animals", status_code=201)
async def create_animal(
    request: Request,
    authorization: Optional[str] = Header(None),
    service: AnimalService = Depends(get_service),
):
    raw = (await request.body()).decode("utf-8", errors="replace")
    ok, payload = await service.create_animal(bearer_token(authorization), raw)
    if not ok:
        status = 401 if payload["error"] == "Unauthorized" else 400
        return JSONResponse(status_code=status, content=payload)
    return payload


@app.get("/animals", response_model=List[Animal])
async def list_animals(service: AnimalService = Depends(get_service)):
    return await service.get_all_animals()


@app.get("/animals/{animal_id}", response_model=Animal)
async def get_animal(animal_id: str, service: AnimalService = Depends(get_service)):
    found, payload = await service.get_one_animal(animal_id)
    if not found:
        return JSONResponse(status_code=404, content=payload)
    return payload


@app.get("/users/{user_id}/animals", response_model=List[Animal])
async def get_user_animals(user_id: str, service: AnimalService = Depends(get_service)):
    found, payload = await service.get_animals_by_user(user_id)
    if not found:
        return JSONResponse(status_code=404, content=payload)
    return payload


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
