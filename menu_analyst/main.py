import logging

from fastapi import FastAPI

from menu_analyst.api.conversation import router as conversation_router
from menu_analyst.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("event", "state", "option", "mime_type", "service", "error", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)


configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Menu Analyst", version="1.0.0")

app.include_router(conversation_router, tags=["conversation"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
