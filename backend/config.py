import os

from brickmap.constants import INPUT_DIR, OUTPUT_DIR  # noqa: F401

# Origins allowed to call the API from a browser
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "BRICKMAP_CORS_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]
