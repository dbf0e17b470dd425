from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend import config
from backend.routers import convert, saves

app = FastAPI(
    title="Brickmap API",
    description="Backend API for converting heightmaps into brick saves",
    version="0.1.0",
)

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(convert.router)
app.include_router(saves.router)


@app.get("/")
async def root():
    return {"status": "ok", "service": "Brickmap API"}
