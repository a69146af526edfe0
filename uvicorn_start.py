#!/usr/bin/env python3
"""
Comfy CMS API Server
Uvicorn start script - uses modular FastAPI app from api.main
"""

import os

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

# For development server
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
        reload=True,
        reload_dirs=["api"],
        reload_delay=0.25,
        log_level="info",
        use_colors=True,
        access_log=True,
    )
