"""Arch Linux VM installer.

Partitions a disk, installs a base Arch system, configures GRUB and layers
KDE Plasma plus a fixed set of user tools, as one ordered run of steps:
- Stops at the first failing step and reports what completed
- Boot mode (UEFI/BIOS) is detected, never asked
- One confirmation gates every destructive command
"""

__version__ = "0.1.0"
