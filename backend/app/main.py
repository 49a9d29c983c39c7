from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.exceptions import register_exception_handlers
from app.startup import configure_startup_logging, run_startup_checks

# Register models on Base before any create_all
import modules.reservations.models  # noqa: F401
from modules.reservations.routes import router as reservation_router

configure_startup_logging()

app = FastAPI(
    title="Reservas - Table Assignment API",
    description="""
    Restaurant reservation backend.

    ## Features

    * **Availability** - Per-slot probe and full lunch/dinner grid for a date
    * **Table Assignment** - Smallest free table or combination for each party
    * **Reservations** - Create, look up, modify and cancel by confirmation code
    """,
    version="1.0.0",
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(reservation_router)


@app.on_event("startup")
async def startup_event():
    """Validate configuration and create tables"""
    run_startup_checks()


@app.get("/")
def read_root():
    return {"message": "Reservation backend is running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
