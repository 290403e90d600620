import argparse
import logging
import os
import sys
import threading
from functools import partial

import requests

from .keys import read_commands
from .poller import MetricsPoller, fetch_snapshot
from .render import Renderer
from .state import TABS, THEMES, DashboardState

DEFAULT_API_BASE = "http://localhost:8000"

CLEAR_SCREEN = "\033[2J\033[H"

logger = logging.getLogger("dashboard")


def build_parser():
    parser = argparse.ArgumentParser(description="Dashboard de métricas no terminal")
    parser.add_argument("--api", default=os.environ.get("MONITOR_API_BASE", DEFAULT_API_BASE))
    parser.add_argument("--tab", choices=list(TABS), default="overview")
    parser.add_argument("--theme", choices=list(THEMES), default="dark")
    parser.add_argument("--once", action="store_true", help="busca uma vez, imprime e sai")
    parser.add_argument("--no-color", action="store_true")
    parser.add_argument("--no-input", action="store_true", help="não lê comandos do stdin")
    parser.add_argument("--log-level", default=os.environ.get("LOG_LEVEL", "WARNING"))
    return parser


def main(argv=None):
    a = build_parser().parse_args(argv)
    logging.basicConfig(
        level=a.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )

    state = DashboardState(active_tab=a.tab, theme=a.theme)
    renderer = Renderer(color=not a.no_color, show_keys=not (a.once or a.no_input))
    session = requests.Session()
    fetch = partial(fetch_snapshot, a.api, session=session)

    logger.info("[DASHBOARD] API: %s", a.api)

    if a.once:
        try:
            MetricsPoller(state, fetch).poll_once()
        finally:
            session.close()
        print(renderer.render(state))
        return 1 if state.error else 0

    screen_lock = threading.Lock()

    def show(current):
        with screen_lock:
            sys.stdout.write(CLEAR_SCREEN + renderer.render(current) + "\n")
            sys.stdout.flush()

    poller = MetricsPoller(state, fetch, on_update=show)
    if not a.no_input:
        threading.Thread(
            target=read_commands, args=(sys.stdin, poller), name="dashboard-keys", daemon=True
        ).start()
    try:
        poller.run()
    except KeyboardInterrupt:
        print("\nEncerrando dashboard...")
    finally:
        poller.stop()
        session.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
