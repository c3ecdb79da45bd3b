"""
FastAPI 애플리케이션 진입점
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from flowershop.database import create_store, init_db
from flowershop.logger import get_logger
from flowershop.routers import customers, delivery_fees, materials, orders, partners, settings, users

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 수명 주기 관리"""
    try:
        init_db()
        app.state.store = create_store()
        logger.info("데이터베이스 및 문서 저장소 초기화 완료")
    except Exception as e:
        logger.error(f"데이터베이스 초기화 실패: {e}", exc_info=True)
        raise
    yield


app = FastAPI(
    title="플라워샵 ERP",
    description="플라워샵 주문, 배송비, 자재, 사용자 관리를 위한 백엔드 API",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 운영 환경에서는 도메인을 지정
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users.router)
app.include_router(delivery_fees.router)
app.include_router(orders.router)
app.include_router(materials.router)
app.include_router(customers.router)
app.include_router(partners.router)
app.include_router(settings.router)

frontend_dir = os.path.join(os.path.dirname(__file__), "..", "frontend")
if os.path.exists(frontend_dir):
    app.mount("/frontend", StaticFiles(directory=frontend_dir), name="frontend")


@app.get("/")
async def root():
    """루트 경로"""
    return {"message": "플라워샵 ERP API"}


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    전역 예외 처리기, 처리되지 않은 모든 예외를 기록

    Returns:
        JSONResponse: 오류 응답
    """
    logger.error(
        f"처리되지 않은 예외: {exc.__class__.__name__}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
            "query_params": str(request.query_params),
            "client": request.client.host if request.client else None,
        }
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "서버 내부 오류",
            "error_type": exc.__class__.__name__
        }
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    요청 검증 예외 처리기

    Returns:
        JSONResponse: 오류 응답
    """
    logger.warning(
        f"요청 검증 실패: {exc.errors()}",
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors())}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
