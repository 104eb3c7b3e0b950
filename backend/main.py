from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from config import settings
from database import Database
from routes import ai, convert, products, tasks

def create_app(database: Optional[Database] = None) -> FastAPI:
    app = FastAPI(
        title="Auqli Tools API",
        description="Convert product catalogs and CSV data for the Auqli marketplace",
        version="1.0.0"
    )

    # Persistence client is owned by the app, routes reach it through get_database
    app.state.db = database or Database(settings.supabase_url, settings.supabase_key)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(convert.router)
    app.include_router(products.router)
    app.include_router(tasks.router)
    app.include_router(ai.router)

    @app.get("/")
    async def root():
        return {
            "message": "Auqli Tools API",
            "version": "1.0.0",
            "status": "running"
        }

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
