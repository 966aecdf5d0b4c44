# Vercel serves the ASGI app exported by this module at /api/getAnalysis
import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app import app  # noqa: E402

handler = app
