"""Batch processing: route every sample document in a directory.

Can be run standalone via ``python -m fnol_agent.core.batch``; the sample and
result directories come from the ``data`` config section.
"""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
from loguru import logger

from fnol_agent.core.errors import FnolError
from fnol_agent.core.ingestion import SUPPORTED_EXTENSIONS, decode_document
from fnol_agent.core.routing import extract_and_route
from fnol_agent.schemas.routing import RoutingConfig

SUMMARY_FILE = "summary.csv"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def process_directory(
    samples_dir: str,
    results_dir: str,
    config: RoutingConfig | None = None,
    strip_pdf_noise: bool = True,
) -> pd.DataFrame:
    """Route each ``.txt`` / ``.pdf`` file in *samples_dir*.

    One ``<file name>.json`` result is written per document to *results_dir*,
    followed by a ``summary.csv`` with one row per processed document.
    Documents that cannot be read or decoded are logged and skipped.

    Parameters
    ----------
    samples_dir:
        Directory holding the FNOL sample documents.
    results_dir:
        Output directory; created if it does not exist.
    config:
        Routing rule set (defaults when ``None``).
    strip_pdf_noise:
        Apply the line-noise filter to text converted from PDF.

    Returns
    -------
    pandas.DataFrame
        The summary table that was written.
    """
    sample_path = Path(samples_dir)
    if not sample_path.is_dir():
        msg = f"Samples directory not found: {samples_dir}"
        logger.error(msg)
        raise FileNotFoundError(msg)

    out_path = Path(results_dir)
    out_path.mkdir(parents=True, exist_ok=True)

    files = sorted(
        p for p in sample_path.iterdir() if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS
    )
    if not files:
        logger.warning("No sample TXT/PDF files found in {dir}", dir=samples_dir)

    rows: list[dict[str, object]] = []
    for file in files:
        row = _process_file(file, out_path, config, strip_pdf_noise)
        if row is not None:
            rows.append(row)

    summary = pd.DataFrame(
        rows, columns=["file", "route", "missing_fields", "inconsistencies", "output"]
    )
    summary.to_csv(out_path / SUMMARY_FILE, index=False)

    logger.info(
        "Processed {n}/{total} documents, results written to {dir}",
        n=len(rows),
        total=len(files),
        dir=results_dir,
    )
    return summary


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _process_file(
    file: Path,
    out_path: Path,
    config: RoutingConfig | None,
    strip_pdf_noise: bool,
) -> dict[str, object] | None:
    """Decode, route and persist one document; ``None`` when it was skipped."""
    try:
        document = decode_document(file)
    except FnolError as exc:
        logger.error("Skipping {name} ({kind}): {err}", name=file.name, kind=exc.kind, err=exc)
        return None

    result = extract_and_route(
        document.text,
        config,
        strip_noise=strip_pdf_noise and document.converted,
    )

    target = out_path / f"{file.name}.json"
    target.write_text(
        json.dumps(result.to_json_dict(), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    logger.info("Processed {name} → {out}", name=file.name, out=target)

    return {
        "file": file.name,
        "route": result.recommended_route.value,
        "missing_fields": len(result.missing_fields),
        "inconsistencies": len(result.inconsistent_fields),
        "output": target.name,
    }


# ---------------------------------------------------------------------------
# CLI entry point (``python -m fnol_agent.core.batch``)
# ---------------------------------------------------------------------------


def _cli() -> None:
    """Standalone batch script; reads Hydra config and processes the samples."""
    import hydra
    from omegaconf import DictConfig

    @hydra.main(version_base=None, config_path="../../../conf", config_name="config")
    def _main(cfg: DictConfig) -> None:
        from fnol_agent.logging.setup import setup_logging

        setup_logging(cfg.logging)
        original_cwd = Path(hydra.utils.get_original_cwd())
        process_directory(
            samples_dir=str(original_cwd / cfg.data.samples_dir),
            results_dir=str(original_cwd / cfg.data.results_dir),
            config=RoutingConfig.from_cfg(cfg.routing),
            strip_pdf_noise=cfg.ingestion.strip_pdf_noise,
        )

    _main()


if __name__ == "__main__":
    _cli()
