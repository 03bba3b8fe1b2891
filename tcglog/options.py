from dataclasses import dataclass


@dataclass(frozen=True)
class DecodeOptions:
    """
    Which vendor specific decoders to try before the generic TCG one.
    One instance is shared, read-only, by every event of a parse.
    """
    enable_grub: bool = False
    enable_systemd_efi_stub: bool = False
    systemd_efi_stub_pcr: int = 8
