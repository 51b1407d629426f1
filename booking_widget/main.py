import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from booking_widget.api.widget import router as widget_router
from booking_widget.core.config import settings
from booking_widget.wiring.dependencies import close_booking_api

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("provider_id", "step", "appointment_date", "appointment_time", "status", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_booking_api()


app = FastAPI(title="Booking Widget", version="1.0.0", lifespan=lifespan)

app.include_router(widget_router, tags=["widget"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
