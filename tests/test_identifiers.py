"""Tests for identifier canonicalization and fallback key derivation."""

from mdm_reporter.normalization.identifiers import (
    admx_module,
    documentation_keys,
    is_excluded_namespace,
    is_placeholder,
    leaf_key,
    scope_label,
    split_resource,
)

NAMESPACES = ["EnterpriseDesktopAppManagement/MSI", "WMIBridge"]


class TestPlaceholders:
    def test_numeric_tokens_are_placeholders(self):
        assert is_placeholder("12")
        assert is_placeholder(" 4 ")

    def test_empty_is_placeholder(self):
        assert is_placeholder("")
        assert is_placeholder(None)

    def test_names_and_paths_are_not_placeholders(self):
        assert not is_placeholder("BitLocker")
        assert not is_placeholder("./Device/Vendor/MSFT/Policy/Config/Wifi/AllowWiFi")
        assert not is_placeholder("12abc")


class TestExcludedNamespaces:
    def test_msi_namespace_excluded(self):
        assert is_excluded_namespace(
            "./Device/Vendor/MSFT/EnterpriseDesktopAppManagement/MSI/{A1}/DownloadInstall", NAMESPACES
        )

    def test_match_is_case_insensitive(self):
        assert is_excluded_namespace("./vendor/msft/wmibridge/foo", NAMESPACES)

    def test_other_paths_kept(self):
        assert not is_excluded_namespace("./Vendor/MSFT/Policy/Config/Browser/HomePages", NAMESPACES)


class TestKeys:
    def test_documentation_keys_for_path(self):
        keys = documentation_keys("./Device/Vendor/MSFT/Policy/Config/Defender/AllowRealtimeMonitoring")
        assert keys == ["Defender", "Config"]

    def test_documentation_keys_for_bare_area(self):
        assert documentation_keys("BitLocker") == ["BitLocker"]

    def test_documentation_keys_for_composite_name(self):
        assert documentation_keys("Chrome~Policy~googlechrome") == []

    def test_short_path_yields_single_key(self):
        assert documentation_keys("./BitLocker/RequireDeviceEncryption") == ["BitLocker"]

    def test_leaf_key(self):
        assert leaf_key("./Vendor/MSFT/WiFi/Profile/CorpWifi") == "CorpWifi"
        assert leaf_key("BitLocker") == "BitLocker"

    def test_split_resource(self):
        assert split_resource("./User/Vendor/MSFT/Policy/Config/Browser/HomePages") == ("Browser", "HomePages")
        assert split_resource("./BitLocker") == ("BitLocker", None)

    def test_admx_module(self):
        assert admx_module("Chrome~Policy~googlechrome") == "Chrome"


class TestScopeLabel:
    def test_device_variants(self):
        assert scope_label("device") == "Device"
        assert scope_label("Device") == "Device"
        assert scope_label(None) == "Device"

    def test_user_sid_passes_through(self):
        assert scope_label("S-1-12-1-1") == "S-1-12-1-1"
