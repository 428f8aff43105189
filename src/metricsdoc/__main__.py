"""Allow ``python -m metricsdoc``."""

from __future__ import annotations

from metricsdoc.cli import main

main()
