"""secretvault entrypoint.

Run with:
  python -m secretvault
"""

import logging
import os

import uvicorn
from dotenv import load_dotenv


def main() -> None:
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.getenv("SV_HOST", "0.0.0.0")
    port = int(os.getenv("SV_PORT", "3000"))
    reload = os.getenv("SV_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    uvicorn.run("secretvault.app:create_app", factory=True, host=host, port=port, reload=reload)

if __name__ == "__main__":
    main()
