from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from dotenv import load_dotenv

from db import init_db
from profile_routes import router as profile_router
from recommendation.routes import router as matching_router
from subscription.routes import router as subscription_router

load_dotenv()

logging.basicConfig(level=logging.INFO)
logging.info("App starting with DATABASE_URL")

app = FastAPI(title="UniMatch API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

init_db()

app.include_router(profile_router)
app.include_router(matching_router)
app.include_router(subscription_router)


@app.get("/health", tags=["meta"], summary="Health check")
def health():
    return {"status": "ok"}
