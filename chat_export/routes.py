"""
Main API router for the chat share exporter

This module aggregates all API routes from individual modules.
"""

from dotenv import load_dotenv
from fastapi import APIRouter

from chat_export.api.export import router as export_router
from chat_export.api.extract import router as extract_router

# Load environment variables first
load_dotenv()

router = APIRouter(prefix="/api")

# Include sub-routers
router.include_router(export_router)
router.include_router(extract_router)
