import logging
import os
import socket

from fleet_browser.logging_config import configure_logging
from fleet_browser.ui.dash_app import create_dash_app

configure_logging()
logger = logging.getLogger("fleet_browser.app")

CONFIG_ROOT = os.getenv("FLEET_BROWSER_CONFIG", "config")
DEFAULT_PORT = 8050
PORT_SEARCH_SPAN = 100

app = create_dash_app(CONFIG_ROOT)
# WSGI entry point (gunicorn app:server)
server = app.server


def _port_in_use(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        return s.connect_ex(("localhost", port)) == 0


def pick_port(preferred: int) -> int:
    """First free port at or above preferred; preferred itself when none is free."""
    for port in range(preferred, preferred + PORT_SEARCH_SPAN):
        if not _port_in_use(port):
            return port
    return preferred


def main() -> None:
    preferred = int(os.getenv("PORT", str(DEFAULT_PORT)))
    port = pick_port(preferred)
    if port != preferred:
        logger.warning("Preferred port busy", extra={"preferred_port": preferred, "port": port})

    app.run(host="0.0.0.0", port=port, debug=os.getenv("DEBUG", "0") == "1")


if __name__ == "__main__":
    main()
