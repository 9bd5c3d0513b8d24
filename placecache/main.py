from contextlib import asynccontextmanager

from fastapi import FastAPI
from placecache.core.db_connection import AsyncDBConnection
from placecache.routes.places_route import router, get_scheduler

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Let pending refreshes and remote syncs finish before shutting down
    await get_scheduler().drain()
    AsyncDBConnection.close()

app = FastAPI(title="Place Details Cache", lifespan=lifespan)
app.include_router(router)

# --- Root Endpoint ---
@app.get("/")
async def root():
    return {
        "message": "Welcome to the Place Details Cache API",
        "status": "running",
        "endpoints": {
            "health": "/health",
            "place": "/places/{place_id}",
            "docs": "/docs"
        },
        "version": "1.0.0"
    }

# --- Health Check ---
@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "Place Details Cache"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("placecache.main:app", host="0.0.0.0", port=8000, reload=True)
