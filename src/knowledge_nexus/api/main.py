"""FastAPI application for the knowledge nexus interface."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import graph


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Knowledge Nexus API",
        description="API for extracting, exploring and unifying knowledge graphs",
        version="0.1.0",
    )

    # Configure CORS for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],  # React dev server
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(graph.router, prefix="/api")

    return app


app = create_app()


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "Knowledge Nexus API is running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("knowledge_nexus.api.main:app", host="0.0.0.0", port=8000, reload=True)
