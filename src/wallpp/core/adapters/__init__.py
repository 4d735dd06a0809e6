"""Upscaler adapter implementations.

Importing this package registers every adapter with
:data:`wallpp.core.upscaler_adapters.upscaler_registry`.
"""

from .lanczos import LanczosUpscaler
from .torchscript_sr import TorchScriptUpscaler

__all__ = ["LanczosUpscaler", "TorchScriptUpscaler"]
