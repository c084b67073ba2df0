# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/detect/detector.py
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Tuple

from ..config.defaults import FALLBACK_LABEL
from ..core.logger import Log
from . import probes
from .version import ProductFamily, VersionInfo, classify_product, extract_release_label

VersionProbe = Callable[[], Tuple[int, int]]
TextProbe = Callable[[], Any]


class VersionDetector:
    """
    Best-effort detection of (product family, feature release label).

    Strategy, first success wins per field:
      product: host (major, build) -> classify_product
      label:   structured DisplayVersion (whole value must be a label)
               -> systeminfo text (first label anywhere in the output)
               -> fallback label

    detect() never raises. Every probe failure is logged and masked, so the
    worst case is UNKNOWN product with the fallback label.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        *,
        version_probe: Optional[VersionProbe] = None,
        structured_probe: Optional[TextProbe] = None,
        text_probe: Optional[TextProbe] = None,
        fallback_label: str = FALLBACK_LABEL,
    ):
        self.logger = logger or logging.getLogger("wupolicy.detect")
        self.version_probe = version_probe or probes.host_version
        self.structured_probe = structured_probe or probes.structured_display_version
        self.text_probe = text_probe or (lambda: probes.systeminfo_report(self.logger))
        self.fallback_label = fallback_label

    def _run_probe(self, name: str, fn: Callable[[], Any]) -> Any:
        try:
            out = fn()
            Log.trace(self.logger, "probe %s -> %r", name, out)
            return out
        except Exception as e:
            Log.warn(self.logger, f"Version probe '{name}' failed: {type(e).__name__}: {e}")
            self.logger.debug("probe %s traceback", name, exc_info=True)
            return None

    def detect_product(self) -> Tuple[ProductFamily, Optional[int], Optional[int]]:
        out = self._run_probe("host_version", self.version_probe)
        major: Optional[int] = None
        build: Optional[int] = None
        try:
            if out is not None:
                major, build = int(out[0]), int(out[1])
        except (TypeError, ValueError, IndexError) as e:
            Log.warn(self.logger, f"Unusable host version {out!r}: {e}")
            major, build = None, None
        product = classify_product(major, build)
        if product is ProductFamily.UNKNOWN:
            Log.warn(self.logger, "Could not classify Windows product", major=major, build=build)
        return product, major, build

    def detect_label(self) -> Tuple[str, str]:
        """Return (label, source) where source is structured|text|default."""
        raw = self._run_probe("structured", self.structured_probe)
        label = extract_release_label(raw, exact=True)
        if label:
            return label, "structured"
        if raw is not None:
            self.logger.debug("Structured probe value %r is not a release label", raw)

        raw = self._run_probe("text", self.text_probe)
        label = extract_release_label(raw)
        if label:
            return label, "text"

        Log.warn(self.logger, f"No release label detected; falling back to {self.fallback_label}")
        return self.fallback_label, "default"

    def detect(self) -> VersionInfo:
        product, major, build = self.detect_product()
        label, source = self.detect_label()
        info = VersionInfo(
            product=product,
            release_label=label,
            label_source=source,
            major=major,
            build=build,
        )
        Log.ok(self.logger, "Detected Windows version", product=info.product_name, release=label, source=source)
        return info
