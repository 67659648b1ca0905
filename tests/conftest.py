"""Shared fixtures for the FNOL agent test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from omegaconf import OmegaConf

from fnol_agent.schemas.routing import RoutingConfig

# ---------------------------------------------------------------------------
# FNOL text fixtures
# ---------------------------------------------------------------------------

COMPLETE_FNOL = """\
Policy Number: ABC123
Policyholder Name: Jane Doe
Date: 2024-01-05
Effective Dates: 01-Jan-2024 to 31-Dec-2024
Location: Springfield
Description: Minor collision damage to bumper.
Claimant: Jane Doe
Claim Type: vehicle
Attachments: photos.jpg
Initial Estimate: 5000
"""


def make_fnol(**overrides: str) -> str:
    """Return the complete FNOL text with some ``Label: value`` lines replaced.

    Keyword names use underscores for spaces (``Initial_Estimate="30000"``).
    A value of ``""`` removes the line entirely.
    """
    lines = []
    for line in COMPLETE_FNOL.splitlines():
        label = line.split(":", 1)[0]
        key = label.replace(" ", "_")
        if key in overrides:
            if overrides[key] == "":
                continue
            line = f"{label}: {overrides[key]}"
        lines.append(line)
    return "\n".join(lines) + "\n"


@pytest.fixture()
def fnol_factory():
    """Builder for scenario variants, see :func:`make_fnol`."""
    return make_fnol


@pytest.fixture()
def complete_fnol() -> str:
    """Scenario text with every mandatory field present and damage of 5000."""
    return COMPLETE_FNOL


@pytest.fixture()
def scanned_fnol() -> str:
    """PDF-converted text full of template labels and placeholder lines."""
    return (
        "AUTOMOBILE LOSS NOTICE\n"
        "POLICY\n"
        "Policy Number: PN-2024-0042\n"
        "PHONE\n"
        "Y / N\n"
        "12/05\n"
        "INSURED'S DETAILS\n"
        "Policyholder Name: Arjun Mehta\n"
        "LOSS\n"
        "Description: The parked car was hit from behind by a delivery van caus-\n"
        "ing damage to the rear bumper and tail lamp.\n"
    )


# ---------------------------------------------------------------------------
# PDF fixtures
# ---------------------------------------------------------------------------


def build_pdf(lines: list[str]) -> bytes:
    """Return a one-page PDF whose text layer holds *lines*, one per row."""
    ops = ["BT", "/F1 11 Tf"]
    y = 760
    for line in lines:
        escaped = line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        ops.append(f"1 0 0 1 72 {y} Tm ({escaped}) Tj")
        y -= 18
    ops.append("ET")
    content = "\n".join(ops).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 5 0 R >> >> /Contents 4 0 R >>",
        b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_at = len(out)
    out += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1,
        xref_at,
    )
    return bytes(out)


SCANNED_PDF_LINES = [
    "AUTOMOBILE LOSS NOTICE",
    "Policy Number: PN-2024-0042",
    "Y / N",
    "Policyholder Name: Arjun Mehta",
    "Location: Pune",
]


@pytest.fixture()
def pdf_factory():
    """Builder for small text-layer PDFs, see :func:`build_pdf`."""
    return build_pdf


@pytest.fixture()
def scanned_pdf() -> bytes:
    """A converted claim form with template residue around real fields."""
    return build_pdf(SCANNED_PDF_LINES)


@pytest.fixture()
def routing_config() -> RoutingConfig:
    return RoutingConfig()


# ---------------------------------------------------------------------------
# Hydra config fixture (test overrides)
# ---------------------------------------------------------------------------


@pytest.fixture()
def test_cfg(tmp_path: Path) -> Any:
    """Return a minimal OmegaConf DictConfig with test overrides."""
    cfg_dict = {
        "routing": {
            "fast_track_threshold": 25000,
            "investigation_keywords": [
                "fraud",
                "fraudulent",
                "staged",
                "inconsistent",
                "suspect",
                "suspicious",
            ],
        },
        "ingestion": {"strip_pdf_noise": True},
        "data": {
            "upload_dir": str(tmp_path / "uploads"),
            "samples_dir": str(tmp_path / "samples"),
            "results_dir": str(tmp_path / "results"),
        },
        "logging": {
            "level": "WARNING",
            "colored": False,
            "format": "pretty",
        },
        "server": {
            "host": "127.0.0.1",
            "port": 5000,
            "debug": False,
            "cors_origins": ["http://localhost:3000"],
        },
    }
    return OmegaConf.create(cfg_dict)
