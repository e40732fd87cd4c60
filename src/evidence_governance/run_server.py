"""Run the evidence governance REST server."""

from __future__ import annotations

import logging

import uvicorn

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    logger.info("Starting evidence-governance REST server on port 8000")
    uvicorn.run("evidence_governance.main:app", host="0.0.0.0", port=8000, log_level="info")


if __name__ == "__main__":
    main()
