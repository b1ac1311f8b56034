from fastapi import APIRouter

from app.api.v1.routes import auth, categories, income_sources, transactions, reports

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(categories.router)
api_router.include_router(income_sources.router)
api_router.include_router(transactions.router)
api_router.include_router(reports.router)


@api_router.get("/health", tags=["Health"])
async def health_check():
    return {"status": "ok"}
