# routers/health.py
# Health check endpoints

import datetime
import sys
import time
from fastapi import APIRouter
from pydantic import BaseModel

from config import settings

class HealthResponse(BaseModel):
    status: str
    timestamp: str
    uptime: int
    version: str

router = APIRouter()

_start_time = time.time()

def get_uptime():
    """Get uptime from when the application started"""
    return int(time.time() - _start_time)

@router.get("/health", response_model=HealthResponse, tags=["health"])
def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="online",
        timestamp=datetime.datetime.now().isoformat(),
        uptime=get_uptime(),
        version=settings.APP_VERSION
    )

@router.get("/health/detailed", tags=["health"])
def detailed_health_check():
    """Detailed health check with runtime information"""
    return {
        "status": "online",
        "timestamp": datetime.datetime.now().isoformat(),
        "uptime": get_uptime(),
        "limits": {
            "max_file_size": settings.MAX_FILE_SIZE,
            "allowed_extensions": sorted(settings.ALLOWED_EXTENSIONS)
        },
        "system": {
            "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
            "start_time": _start_time
        }
    }
