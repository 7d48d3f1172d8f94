"""
Entry point for the footprint service.

Running this script with ``python run.py`` will start the FastAPI
server that computes PolyCam footprints on Bennu.  The application
defined in ``backend/footprint/main.py`` is imported after adjusting
the Python path to include the ``backend`` directory.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import logging
import uvicorn

logging.basicConfig(
    level=logging.DEBUG if os.getenv("WGC_DEBUG") else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def main() -> None:
    """Run the Uvicorn server hosting the footprint application."""
    # Ensure backend/ is on sys.path so that ``footprint`` can be imported
    # when the project has not been installed.
    backend_dir = Path(__file__).resolve().parent / "backend"
    if str(backend_dir) not in sys.path:
        sys.path.append(str(backend_dir))

    # Import the FastAPI application.  We import inside main() to avoid
    # modifying sys.path at module import time.
    from footprint.main import app  # type: ignore

    # Start Uvicorn.  Bind to all interfaces on port 8000 by default.
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))


if __name__ == "__main__":
    main()
