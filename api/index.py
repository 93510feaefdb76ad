"""
Serverless entry point for the proxy (Vercel / AWS Lambda)
"""
import sys
from pathlib import Path

# Add backend to Python path when running from a plain checkout
backend_path = Path(__file__).parent.parent / "backend"
sys.path.insert(0, str(backend_path))

from ghproxy.main import app

# Mangum translates Lambda-style events into ASGI calls
from mangum import Mangum

# lifespan off: every invocation may run in a fresh process
mangum_handler = Mangum(app, lifespan="off")


def handler(event, context=None):
    """Serverless function handler"""
    return mangum_handler(event, context)
