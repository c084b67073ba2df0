# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/detect/version.py
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

# Windows 11 shares the 10.0 kernel version; only the build number tells them apart.
WINDOWS_11_FIRST_BUILD = 22000

RELEASE_LABEL_RE = re.compile(r"\d{2}H\d")


class ProductFamily(Enum):
    """Windows product lines the update policy can pin."""

    UNKNOWN = "Unknown"
    WINDOWS_10 = "Windows 10"
    WINDOWS_11 = "Windows 11"


def classify_product(major: Optional[int], build: Optional[int]) -> ProductFamily:
    """
    Map a kernel major version and build number to a product family.

    10.x with build >= 22000 is Windows 11, any lower 10.x build is Windows 10,
    anything else (including missing values) is UNKNOWN.
    """
    if major != 10 or build is None:
        return ProductFamily.UNKNOWN
    if build >= WINDOWS_11_FIRST_BUILD:
        return ProductFamily.WINDOWS_11
    return ProductFamily.WINDOWS_10


def extract_release_label(text: Any, *, exact: bool = False) -> Optional[str]:
    """
    Pull a feature release label ("22H2", "23H2", ...) out of probe output.

    exact=True: the whole (stripped) text must be a label; this is how a
      structured value such as DisplayVersion is accepted or rejected.
    exact=False: first label found anywhere in the text; this is how free-form
      report output is searched.

    Returns None for None, non-text or label-free input.
    """
    if text is None:
        return None
    if isinstance(text, bytes):
        text = text.decode("utf-8", "replace")
    if not isinstance(text, str):
        return None
    if exact:
        s = text.strip()
        return s if RELEASE_LABEL_RE.fullmatch(s) else None
    m = RELEASE_LABEL_RE.search(text)
    return m.group(0) if m else None


@dataclass(frozen=True)
class VersionInfo:
    """Detected product family and feature release label for this run."""

    product: ProductFamily
    release_label: str

    # Detection meta
    label_source: str = "default"
    major: Optional[int] = None
    build: Optional[int] = None

    @property
    def product_name(self) -> str:
        return self.product.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product": self.product_name,
            "release_label": self.release_label,
            "label_source": self.label_source,
            "major": self.major,
            "build": self.build,
        }
