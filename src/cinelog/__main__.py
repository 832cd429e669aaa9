"""Cinelog entrypoint.

Run with:
  python -m cinelog
"""

import logging
import os

import uvicorn


def main() -> None:
    logging.basicConfig(
        level=os.getenv("CINELOG_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.getenv("CINELOG_HOST", "0.0.0.0")
    port = int(os.getenv("CINELOG_PORT") or os.getenv("PORT") or "8000")
    reload = os.getenv("CINELOG_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    uvicorn.run("cinelog.app:app", host=host, port=port, reload=reload)

if __name__ == "__main__":
    main()
