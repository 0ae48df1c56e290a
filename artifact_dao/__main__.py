# artifact_dao/__main__.py
"""
Entry point for running the governance node as a module:
    python -m artifact_dao [--host 127.0.0.1] [--port 8000] [--root .]

Settings come from <root>/artifact_dao.yaml plus env overrides
(DAO_OWNER, DAO_ASSIGNEE, DAO_QUORUM, DAO_DEBATE_PERIOD_SEC, DAO_LOG_LEVEL).
"""

from __future__ import annotations

import argparse
import os


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        prog="artifact-dao",
        description="Run the artifact_dao governance API",
    )
    p.add_argument(
        "--root",
        default=os.environ.get("DAO_REPO_ROOT", os.getcwd()),
        help="Directory holding artifact_dao.yaml (default: cwd)",
    )
    p.add_argument("--host", default=None, help="Bind address (default: from config)")
    p.add_argument("--port", type=int, default=None, help="Port (default: from config)")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    # The engine singleton reads its config at import time.
    os.environ["DAO_REPO_ROOT"] = args.root

    import uvicorn

    from . import config as dao_config

    cfg = dao_config.load_config(args.root)
    dao_config.configure_logging(cfg)

    from .dao_api import app

    uvicorn.run(
        app,
        host=args.host or dao_config.get_bind_host(cfg),
        port=args.port or dao_config.get_bind_port(cfg),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
