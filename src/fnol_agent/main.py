"""FNOL Agent server entry point.

Uses Hydra to load configuration and then starts the FastAPI application via
uvicorn.

Usage::

    python -m fnol_agent.main                                  # default config
    python -m fnol_agent.main routing.fast_track_threshold=50000  # override
"""

from __future__ import annotations

import os
from pathlib import Path

import hydra
import uvicorn
from dotenv import load_dotenv
from loguru import logger
from omegaconf import DictConfig, open_dict

from fnol_agent.api.app import create_app

# Load .env BEFORE Hydra resolves ${oc.env:...} references
load_dotenv()

_DATA_PATH_KEYS = ("upload_dir", "samples_dir", "results_dir")


def _resolve_data_paths(cfg: DictConfig) -> None:
    """Anchor relative ``cfg.data`` paths to the original working directory.

    Hydra changes the CWD to ``outputs/<date>/<time>/``, so relative upload and
    sample directories would otherwise land inside the run directory.
    """
    original_cwd = Path(hydra.utils.get_original_cwd())

    with open_dict(cfg):
        for key in _DATA_PATH_KEYS:
            resolved = Path(cfg.data[key])
            if not resolved.is_absolute():
                cfg.data[key] = str(original_cwd / resolved)


@hydra.main(version_base=None, config_path="../../conf", config_name="config")
def main(cfg: DictConfig) -> None:
    """Bootstrap the application from Hydra config and run uvicorn."""
    _resolve_data_paths(cfg)
    os.chdir(hydra.utils.get_original_cwd())

    app = create_app(cfg)

    host: str = cfg.server.host
    port: int = cfg.server.port
    debug: bool = cfg.server.debug

    logger.info(
        "FNOL Agent listening on {host}:{port} (debug={debug})",
        host=host,
        port=port,
        debug=debug,
    )

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="debug" if debug else "info",
    )


if __name__ == "__main__":
    main()
