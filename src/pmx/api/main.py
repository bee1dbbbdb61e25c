from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager
from typing import AsyncIterator, List

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse

from pmx import __version__
from pmx.errors import (
    AgentDisabledError,
    PathError,
    PmxError,
    ProfileExistsError,
    ProfileNotFoundError,
)
from pmx.mcp_server.server import PromptDisabledError, PromptExposure, PromptNotFoundError
from pmx.models.api import (
    ApplyRequest,
    ApplyResult,
    Profile,
    ProfileCreateRequest,
    ProfileNames,
    ProfileUpdateRequest,
)
from pmx.models.profile import ProfileDirectory, PromptContent, PromptInfo
from pmx.models.storage import StorageRoot
from pmx.providers.manager import UnknownAgentError
from pmx.services import storage_service
from pmx.services.integration_service import IntegrationService
from pmx.services.profile_service import ProfileRepository
from pmx.utils.logging import setup_logging

LOG = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    if getattr(app.state, "storage_path", None) is None:
        setup_logging(logging.INFO)
        configure()
    LOG.info("Serving profiles from %s", app.state.storage_path)
    yield


app = FastAPI(title="pmx API", version=__version__, lifespan=lifespan)

_STATUS_BY_ERROR = [
    (PathError, status.HTTP_400_BAD_REQUEST),
    (UnknownAgentError, status.HTTP_404_NOT_FOUND),
    (AgentDisabledError, status.HTTP_403_FORBIDDEN),
    (PromptDisabledError, status.HTTP_403_FORBIDDEN),
    (ProfileNotFoundError, status.HTTP_404_NOT_FOUND),
    (PromptNotFoundError, status.HTTP_404_NOT_FOUND),
    (ProfileExistsError, status.HTTP_409_CONFLICT),
]


def configure(storage_path=None) -> None:
    """Attach the resolved storage path and the mutation lock to the app.

    Only the path is cached; the storage root and its config are reloaded
    for every request.
    """
    storage = storage_service.open_storage(storage_path)
    app.state.storage_path = storage.path
    app.state.mutation_lock = threading.Lock()


@app.exception_handler(PmxError)
async def pmx_error_handler(_request: Request, exc: PmxError) -> JSONResponse:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            break
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        LOG.error("Request failed: %s", exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def get_storage() -> StorageRoot:
    return storage_service.load(app.state.storage_path)


def get_lock() -> threading.Lock:
    return app.state.mutation_lock


@app.get("/health")
def health() -> dict[str, str]:
    """Lightweight health probe."""
    return {"status": "ok"}


@app.get("/profiles", response_model=ProfileNames)
def list_profiles(storage: StorageRoot = Depends(get_storage)) -> ProfileNames:
    return ProfileNames(names=ProfileRepository(storage).names())


@app.get("/profiles/tree", response_model=ProfileDirectory)
def profile_tree(storage: StorageRoot = Depends(get_storage)) -> ProfileDirectory:
    return ProfileRepository(storage).list()


@app.post("/profiles", response_model=Profile, status_code=status.HTTP_201_CREATED)
def create_profile(
    payload: ProfileCreateRequest,
    storage: StorageRoot = Depends(get_storage),
    lock: threading.Lock = Depends(get_lock),
) -> Profile:
    with lock:
        ProfileRepository(storage).create(payload.name, payload.content)
    return Profile(name=payload.name, content=payload.content)


@app.get("/profiles/{name:path}", response_model=Profile)
def get_profile(name: str, storage: StorageRoot = Depends(get_storage)) -> Profile:
    return Profile(name=name, content=ProfileRepository(storage).read(name))


@app.put("/profiles/{name:path}", response_model=Profile)
def update_profile(
    name: str,
    payload: ProfileUpdateRequest,
    storage: StorageRoot = Depends(get_storage),
    lock: threading.Lock = Depends(get_lock),
) -> Profile:
    with lock:
        ProfileRepository(storage).write(name, payload.content)
    return Profile(name=name, content=payload.content)


@app.delete("/profiles/{name:path}", status_code=status.HTTP_204_NO_CONTENT)
def delete_profile(
    name: str,
    storage: StorageRoot = Depends(get_storage),
    lock: threading.Lock = Depends(get_lock),
) -> None:
    with lock:
        ProfileRepository(storage).delete(name)


@app.get("/prompts", response_model=List[PromptInfo])
def list_prompts(storage: StorageRoot = Depends(get_storage)) -> List[PromptInfo]:
    return PromptExposure(storage).list_prompts()


@app.get("/prompts/{name:path}", response_model=PromptContent)
def get_prompt(name: str, storage: StorageRoot = Depends(get_storage)) -> PromptContent:
    return PromptExposure(storage).get_prompt(name)


@app.post("/agents/{agent}/set", response_model=ApplyResult)
def set_agent_profile(
    agent: str,
    payload: ApplyRequest,
    storage: StorageRoot = Depends(get_storage),
    lock: threading.Lock = Depends(get_lock),
) -> ApplyResult:
    with lock:
        target = IntegrationService(storage).set_profile(agent, payload.name)
    return ApplyResult(agent=agent, target=str(target))


@app.post("/agents/{agent}/append", response_model=ApplyResult)
def append_agent_profile(
    agent: str,
    payload: ApplyRequest,
    storage: StorageRoot = Depends(get_storage),
    lock: threading.Lock = Depends(get_lock),
) -> ApplyResult:
    with lock:
        target = IntegrationService(storage).append_profile(agent, payload.name, allow_paths=False)
    return ApplyResult(agent=agent, target=str(target))


@app.post("/agents/{agent}/reset", response_model=ApplyResult)
def reset_agent_profile(
    agent: str,
    storage: StorageRoot = Depends(get_storage),
    lock: threading.Lock = Depends(get_lock),
) -> ApplyResult:
    service = IntegrationService(storage)
    with lock:
        removed = service.reset_profile(agent)
    return ApplyResult(agent=agent, target=str(service.target(agent).path), changed=removed)
