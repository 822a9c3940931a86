from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .board import open_board
from .config import CORS_ORIGINS, DATABASE_URL
from .routers import board, tasks


def create_app(database_url: str = DATABASE_URL) -> FastAPI:
    # Connect to the store and open the live query on startup
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.board = open_board(database_url)
        await app.state.board.start()
        try:
            yield
        finally:
            app.state.board.stop()

    app = FastAPI(
        title="Task Cards",
        description="Shared task list with live card rendering",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(board.router, tags=["board"])
    app.include_router(tasks.router, prefix="/api", tags=["tasks"])

    @app.get("/health")
    def health_check(request: Request):
        return {"status": "healthy", "store": request.app.state.board.status.value}

    return app


app = create_app()
