from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, load_settings, setup_logging
from .exceptions import InvalidArgumentError, NotFoundError, UnauthorizedError
from .models import DeleteExpenseResponse, GroupExpensesResponse, PairwiseBalanceResponse
from .service import BalanceService
from .storage import InMemoryRecordStore

router = APIRouter()


def get_service(request: Request) -> BalanceService:
    return request.app.state.balance_service


def get_current_user_id(x_user_id: UUID = Header(..., description="Authenticated user id")) -> UUID:
    return x_user_id


@router.get("/health", tags=["System"])
def health_check():
    return {"status": "healthy", "service": "split-balances"}


@router.get("/users/{user_id}/expenses", response_model=PairwiseBalanceResponse, tags=["Balances"])
def get_expenses_between_users(
    user_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    service: BalanceService = Depends(get_service),
) -> PairwiseBalanceResponse:
    try:
        return service.get_expenses_between_users(current_user_id, user_id)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/groups/{group_id}/expenses", response_model=GroupExpensesResponse, tags=["Balances"])
def get_group_expenses(
    group_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    service: BalanceService = Depends(get_service),
) -> GroupExpensesResponse:
    try:
        return service.get_group_expenses(current_user_id, group_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except UnauthorizedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))


@router.delete("/expenses/{expense_id}", response_model=DeleteExpenseResponse, tags=["Expenses"])
def delete_expense(
    expense_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    service: BalanceService = Depends(get_service),
) -> DeleteExpenseResponse:
    try:
        return service.delete_expense(current_user_id, expense_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except UnauthorizedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[BalanceService] = None,
    root_path: str = "",
) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Pairwise balances and netted group debt ledgers for shared expenses",
        version="1.0.0",
        root_path=root_path,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.balance_service = service or BalanceService(
        InMemoryRecordStore(seed=settings.seed_demo_data)
    )
    app.include_router(router)
    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
