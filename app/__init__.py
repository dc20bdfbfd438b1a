from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.component.services import lifespan
from app.exception.handler import register_exception_handlers

# Initialize FastAPI with title
api = FastAPI(title="Walrus Container API", version="1.0.0", lifespan=lifespan)

# Add CORS middleware
api.add_middleware(
    CORSMiddleware, allow_origins=["*"], allow_credentials=True, allow_methods=["*"], allow_headers=["*"]
)

register_exception_handlers(api)
