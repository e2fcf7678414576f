"""Winning-provider attribution for configured settings."""

from collections.abc import Iterable

from mdm_reporter.models.records import WinningProviderFlag

from .extract import WINNING_PROVIDER_SUFFIX


class WinningProviderResolver:
    """Maps a setting to the enrollment whose value won.

    A provider equal to the device's own primary-channel enrollment id is
    reported under *primary_label* instead of the raw GUID.
    """

    def __init__(
        self,
        flags: Iterable[WinningProviderFlag],
        device_enrollment_id: str | None = None,
        primary_label: str = "Intune",
    ) -> None:
        self._flags: dict[str, str | None] = {}
        for flag in flags:
            self._flags.setdefault(f"{flag.setting}{WINNING_PROVIDER_SUFFIX}", flag.provider)
        self.device_enrollment_id = device_enrollment_id
        self.primary_label = primary_label

    def resolve(self, setting: str | None) -> str | None:
        if not setting:
            return None
        provider = self._flags.get(f"{setting}{WINNING_PROVIDER_SUFFIX}")
        if provider is None:
            return None
        if self.device_enrollment_id and _same_id(provider, self.device_enrollment_id):
            return self.primary_label
        return provider


def _same_id(left: str, right: str) -> bool:
    return left.strip("{} ").lower() == right.strip("{} ").lower()
