# SPDX-License-Identifier: LGPL-3.0-or-later
# wupolicy/detect/__init__.py
from .detector import VersionDetector
from .version import ProductFamily, VersionInfo, classify_product, extract_release_label

__all__ = ["VersionDetector", "ProductFamily", "VersionInfo", "classify_product", "extract_release_label"]
