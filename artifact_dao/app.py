"""
artifact_dao/app.py
-------------------
Thin entrypoint for running the governance API via:

    uvicorn artifact_dao.app:app

All real route wiring lives in artifact_dao.dao_api.
"""

from .dao_api import app as app  # re-export for uvicorn


if __name__ == "__main__":
    # Convenience for: python -m artifact_dao.app
    import uvicorn

    from . import config as dao_config
    from .dao_executor import REPO_ROOT

    cfg = dao_config.load_config(REPO_ROOT)
    dao_config.configure_logging(cfg)
    uvicorn.run(app, host=dao_config.get_bind_host(cfg), port=dao_config.get_bind_port(cfg))
