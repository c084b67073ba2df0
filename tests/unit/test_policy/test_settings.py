# SPDX-License-Identifier: LGPL-3.0-or-later
import unittest

from wupolicy.detect.version import ProductFamily, VersionInfo
from wupolicy.policy.settings import GATE_KEYS, build_policy_settings, settings_as_dict
from wupolicy.policy.store import ValueKind


class TestPolicySettings(unittest.TestCase):
    """Test the five-value Windows Update policy schema."""

    def test_values_for_windows_10(self):
        """Test that every value is derived from the detected version."""
        info = VersionInfo(ProductFamily.WINDOWS_10, "22H2")
        settings = build_policy_settings(info, defer_days=0)

        self.assertEqual(
            settings_as_dict(settings),
            {
                "ProductVersion": "Windows 10",
                "TargetReleaseVersion": 1,
                "TargetReleaseVersionInfo": "22H2",
                "DeferQualityUpdates": 1,
                "DeferQualityUpdatesPeriodInDays": 0,
            },
        )

    def test_default_deferral_is_four_days(self):
        """Test the default quality update deferral."""
        info = VersionInfo(ProductFamily.WINDOWS_11, "24H2")
        self.assertEqual(settings_as_dict(build_policy_settings(info))["DeferQualityUpdatesPeriodInDays"], 4)

    def test_gate_keys_are_strings(self):
        """Test that the values compared by scheduled runs are string kinds."""
        info = VersionInfo(ProductFamily.WINDOWS_11, "24H2")
        by_name = {s.name: s for s in build_policy_settings(info)}
        for key in GATE_KEYS:
            self.assertIs(by_name[key].kind, ValueKind.SZ)


class TestValueKind(unittest.TestCase):
    """Test value coercion to registry kinds."""

    def test_coerce(self):
        cases = [
            (ValueKind.DWORD, "4", 4),
            (ValueKind.DWORD, True, 1),
            (ValueKind.QWORD, 7, 7),
            (ValueKind.SZ, 4, "4"),
            (ValueKind.EXPAND_SZ, "23H2", "23H2"),
        ]
        for kind, value, expected in cases:
            with self.subTest(kind=kind, value=value):
                self.assertEqual(kind.coerce(value), expected)

    def test_text_cannot_become_dword(self):
        """Test that a product name can't be stored as an integer kind."""
        with self.assertRaises(ValueError):
            ValueKind.DWORD.coerce("Windows 11")


if __name__ == "__main__":
    unittest.main()
