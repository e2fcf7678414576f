"""Shared fixtures: a representative MDMDiagReport.xml and small builders."""
from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from mdm_reporter.collection.reader import parse_document

DEVICE_ENROLLMENT_ID = "4B9A1C2D-1111-4222-8333-A1B2C3D4E5F6"
OTHER_ENROLLMENT_ID = "7E1F0A55-9999-4AAA-8BBB-0C0D0E0F1A2B"
USER_SID = "S-1-12-1-1111111111-2222222222-3333333333-4444444444"

SAMPLE_XML = f"""<?xml version="1.0" encoding="utf-8"?>
<MDMEnterpriseDiagnosticsReport>
  <Resources>
    <Enrollment>
      <EnrollmentID>{DEVICE_ENROLLMENT_ID}</EnrollmentID>
      <Scope ResourceTarget="device">
        <Resources>
          <Type>default</Type>
          <Resource>./Device/Vendor/MSFT/Policy/Config/Defender/AllowRealtimeMonitoring</Resource>
          <Resource>./Vendor/MSFT/WiFi/Profile/CorpWifi</Resource>
          <Resource>12</Resource>
          <Resource>./Device/Vendor/MSFT/EnterpriseDesktopAppManagement/MSI/{{A1B2}}/DownloadInstall</Resource>
          <Resource>./Vendor/MSFT/WMIBridge/MDM_Policy_Config01/Setting</Resource>
        </Resources>
      </Scope>
      <Scope ResourceTarget="{USER_SID}">
        <Resources>
          <Resource>./User/Vendor/MSFT/Policy/Config/Browser/HomePages</Resource>
        </Resources>
      </Scope>
    </Enrollment>
  </Resources>
  <PolicyManager>
    <ConfigSource>
      <EnrollmentId>{DEVICE_ENROLLMENT_ID}</EnrollmentId>
      <PolicyScope PolicyScope="Device">
        <Area PolicyAreaName="BitLocker">
          <RequireDeviceEncryption>1</RequireDeviceEncryption>
          <RequireDeviceEncryption_LastWrite>1</RequireDeviceEncryption_LastWrite>
        </Area>
        <Area PolicyAreaName="Defender">
          <AllowRealtimeMonitoring>1</AllowRealtimeMonitoring>
          <AllowRealtimeMonitoring_LastWrite>1</AllowRealtimeMonitoring_LastWrite>
        </Area>
        <Area PolicyAreaName="Chrome~Policy~googlechrome">
          <HomepageLocation>&lt;enabled/&gt;</HomepageLocation>
        </Area>
        <Area>
          <PolicyAreaName>Update</PolicyAreaName>
        </Area>
      </PolicyScope>
    </ConfigSource>
    <AreaMetadata>
      <PolicyAreaName>BitLocker</PolicyAreaName>
      <PolicyMetadata>
        <PolicyName>RequireDeviceEncryption</PolicyName>
        <Behavior>32</Behavior>
        <DefaultValue>0</DefaultValue>
        <PolicyType>4</PolicyType>
        <RegKeyPathRedirect>Software\\Policies\\Microsoft\\Windows\\FVE</RegKeyPathRedirect>
        <RegValueNameRedirect>RequireDeviceEncryption</RegValueNameRedirect>
      </PolicyMetadata>
    </AreaMetadata>
    <IngestedAdmxPolicyMetadata>
      <ConfigSource>
        <EnrollmentId>{DEVICE_ENROLLMENT_ID}</EnrollmentId>
        <AdmxMetadataDevice>
          <Area PolicyAreaName="Chrome~Policy~googlechrome">
            <PolicyMetadata>
              <PolicyName>HomepageLocation</PolicyName>
              <PolicyType>1</PolicyType>
              <RegKeyPathRedirect>Software\\Policies\\Google\\Chrome</RegKeyPathRedirect>
              <RegValueNameRedirect>HomepageLocation</RegValueNameRedirect>
            </PolicyMetadata>
          </Area>
        </AdmxMetadataDevice>
      </ConfigSource>
    </IngestedAdmxPolicyMetadata>
    <CurrentPolicies>
      <CurrentPolicyValues>
        <RequireDeviceEncryption_ProviderSet>1</RequireDeviceEncryption_ProviderSet>
        <RequireDeviceEncryption_WinningProvider>{DEVICE_ENROLLMENT_ID}</RequireDeviceEncryption_WinningProvider>
        <AllowRealtimeMonitoring_WinningProvider>{OTHER_ENROLLMENT_ID}</AllowRealtimeMonitoring_WinningProvider>
      </CurrentPolicyValues>
    </CurrentPolicies>
  </PolicyManager>
  <Diagnostics>
    <ErrorLog>
      <Component>
        <ComponentName>ConfigManager</ComponentName>
        <SubComponent>
          <Name>CorpWifi</Name>
          <Error>-2016345612</Error>
          <Metadata1>Profile</Metadata1>
          <Time>2026-10-01 08:00:00.000</Time>
        </SubComponent>
      </Component>
    </ErrorLog>
  </Diagnostics>
  <EnterpriseDesktopAppManagementinfo>
    <MsiInstallations>
      <TargetedUser>
        <UserSID>S-0-0-00-0000000000-0000000000-000000000-000</UserSID>
        <Package>
          <Type>MSI</Type>
          <Details>
            <PackageId>{{11111111-2222-3333-4444-555555555555}}</PackageId>
            <ProductVersion>1.2.3</ProductVersion>
            <Status>70</Status>
            <LastError>0</LastError>
            <CommandLine>/quiet</CommandLine>
            <EnforcementRetryIndex>0</EnforcementRetryIndex>
            <EnforcementRetryCount>3</EnforcementRetryCount>
          </Details>
        </Package>
      </TargetedUser>
    </MsiInstallations>
  </EnterpriseDesktopAppManagementinfo>
</MDMEnterpriseDiagnosticsReport>
"""


def make_document(body: str) -> ET.Element:
    """Parse a document whose root wraps *body*."""
    return parse_document(f"<MDMEnterpriseDiagnosticsReport>{body}</MDMEnterpriseDiagnosticsReport>")


def policy_area_xml(area: str, settings: dict[str, str], scope: str = "Device", enrollment_id: str = DEVICE_ENROLLMENT_ID) -> str:
    children = "".join(f"<{k}>{v}</{k}>" for k, v in settings.items())
    return (
        "<ConfigSource>"
        f"<EnrollmentId>{enrollment_id}</EnrollmentId>"
        f'<PolicyScope PolicyScope="{scope}"><Area PolicyAreaName="{area}">{children}</Area></PolicyScope>'
        "</ConfigSource>"
    )


def error_entry_xml(name: str, error: str, metadata2: str | None = None, component: str = "ConfigManager") -> str:
    meta = f"<Metadata2>{metadata2}</Metadata2>" if metadata2 is not None else ""
    return (
        f"<Component><ComponentName>{component}</ComponentName>"
        f"<SubComponent><Name>{name}</Name><Error>{error}</Error>{meta}<Time>2026-10-01 08:00:00.000</Time></SubComponent>"
        "</Component>"
    )


@pytest.fixture()
def sample_root() -> ET.Element:
    return parse_document(SAMPLE_XML)


@pytest.fixture()
def sample_path(tmp_path: Path) -> Path:
    path = tmp_path / "MDMDiagReport.xml"
    path.write_text(SAMPLE_XML, encoding="utf-8")
    return path
