"""Dashboard API endpoints: list, add and forget a user's service accounts."""

import logging
import time

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from servicepay.api.auth import require_session
from servicepay.api.errors import StoreUnavailableError, raise_app_error
from servicepay.api.schemas import AddServicePayload, ServicesResponse, ServiceSummaryResponse
from servicepay.services import get_db
from servicepay.services.account_repository import AccountRepository
from servicepay.services.dashboard_service import DashboardService
from servicepay.services.directory_service import LedgerDirectory, SessionDirectoryStore
from servicepay.services.provisioning_service import AccountProvisioner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def _log_debug(endpoint: str, start_time: float, **kwargs) -> None:
    """Log API request with timing at DEBUG level."""
    duration_ms = int((time.time() - start_time) * 1000)
    extra = " ".join(f"{k}={v}" for k, v in kwargs.items())
    logger.debug(
        "dashboard.%s: %sduration_ms=%d",
        endpoint,
        f"{extra} " if extra else "",
        duration_ms,
    )


def get_directory_store(request: Request) -> SessionDirectoryStore:
    """Session directory store owned by the application."""
    return request.app.state.directory_store


def get_provisioner(request: Request) -> AccountProvisioner:
    """Account provisioner configured for the application."""
    return request.app.state.provisioner


def get_dashboard_service(request: Request) -> DashboardService:
    """Summary builder configured for the application."""
    return request.app.state.dashboard_service


def _load_directory(
    store: SessionDirectoryStore, session_token: str, db: Session | None
) -> LedgerDirectory:
    """Return the session directory, hydrating it from the store on first use."""
    directory = store.get(session_token)
    if directory.loaded or db is None:
        return directory

    repository = AccountRepository(db)
    try:
        directory.hydrate(lambda: repository.list_for_owner(session_token))
    except SQLAlchemyError:
        logger.error("Failed to load service accounts", exc_info=True)
        raise_app_error(StoreUnavailableError())
    return directory


@router.get("/services", response_model=ServicesResponse)
def list_services(
    session_token: str = Depends(require_session),
    store: SessionDirectoryStore = Depends(get_directory_store),
    dashboard: DashboardService = Depends(get_dashboard_service),
    db: Session | None = Depends(get_db),
) -> ServicesResponse:
    """List the session's accounts with their active period and debt."""
    start_time = time.time()
    directory = _load_directory(store, session_token, db)

    summaries = dashboard.summarize_all(directory.list())
    response = ServicesResponse(
        services=[ServiceSummaryResponse.model_validate(s) for s in summaries],
        total_count=len(summaries),
    )
    _log_debug("list_services", start_time, count=len(summaries))
    return response


@router.post(
    "/services",
    response_model=ServiceSummaryResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_service(
    payload: AddServicePayload,
    session_token: str = Depends(require_session),
    store: SessionDirectoryStore = Depends(get_directory_store),
    provisioner: AccountProvisioner = Depends(get_provisioner),
    dashboard: DashboardService = Depends(get_dashboard_service),
    db: Session | None = Depends(get_db),
) -> ServiceSummaryResponse:
    """Provision a new account, store it and append it to the directory."""
    start_time = time.time()
    directory = _load_directory(store, session_token, db)

    account = provisioner.provision(
        provider=payload.provider,
        account_number=payload.account_number,
        alias=payload.alias,
        owner_id=session_token,
    )

    if db is not None:
        try:
            account = AccountRepository(db).add(account)
        except SQLAlchemyError:
            raise_app_error(StoreUnavailableError("Failed to add service"))

    directory.add(account)
    _log_debug("add_service", start_time, account_id=account.id)
    return ServiceSummaryResponse.model_validate(dashboard.summarize(account))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    session_token: str = Depends(require_session),
    store: SessionDirectoryStore = Depends(get_directory_store),
) -> Response:
    """Forget the session's directory."""
    dropped = store.drop(session_token)
    logger.info("Session logged out (directory_dropped=%s)", dropped)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
