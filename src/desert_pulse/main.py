"""Main FastAPI application."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from desert_pulse.api.pages import router as pages_router
from desert_pulse.api.routes import router
from desert_pulse.auth import LoginRequired
from desert_pulse.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Desert Pulse Fitness")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    response = RedirectResponse("/login", status_code=303)
    if exc.clear_cookie:
        response.delete_cookie(settings.COOKIE_NAME)
    return response


app.include_router(router)
app.include_router(pages_router)
