"""Base classes and registry for upscaler adapters.

The size normalizer needs a single capability from the outside world:
``upscale(raster, factor)`` with ``factor`` either 2 or 4. Which technique
backs it (a classic Lanczos filter, a super-resolution network) is a
deployment choice, so every technique lives behind an adapter with a common
interface and is looked up by name in a registry.

Upscaler Adapter Pattern
------------------------
Each adapter encapsulates:
- Model loading and unloading (a no-op for filter-based adapters)
- The upscale operation itself
- Conversion of backend failures into :class:`ResampleError`

Usage Example
-------------
    >>> from wallpp.core.upscaler_adapters import upscaler_registry
    >>> from wallpp.core.config import WallppConfig
    >>>
    >>> print(upscaler_registry.list_available())
    ['Lanczos', 'TorchScript-SR']
    >>>
    >>> upscaler = upscaler_registry.instantiate("Lanczos", WallppConfig())
    >>> bigger = upscaler.upscale(raster, 4)

See Also
--------
- SizeNormalizer: the only caller of ``upscale``
- WallppConfig: upscaler selection and model settings
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from PIL import Image

from .config import WallppConfig
from .errors import ResampleError

logger = logging.getLogger(__name__)

SUPPORTED_FACTORS = (2, 4)


class UpscalerAdapterBase(ABC):
    """Abstract base class for all upscaler adapters.

    Each adapter must implement:
    - Model loading and unloading
    - ``_upscale`` for a validated factor
    - Model state reporting

    Attributes
    ----------
    name : str
        Registry name of the adapter (e.g., "Lanczos")
    description : str
        Brief description of the technique
    requires_model : bool
        Whether a model file must be configured
    config : WallppConfig
        Configuration object containing upscaler settings

    Notes
    -----
    - Adapters should load lazily (on first upscale)
    - ``upscale`` validates the factor; subclasses only see 2 or 4

    Examples
    --------
    Creating a custom adapter:

        >>> class NearestUpscaler(UpscalerAdapterBase):
        ...     name = "Nearest"
        ...     description = "Pixel replication"
        ...
        ...     def load_model(self):
        ...         pass
        ...
        ...     def _upscale(self, raster, factor):
        ...         return raster.resize(
        ...             (raster.width * factor, raster.height * factor),
        ...             Image.Resampling.NEAREST,
        ...         )
        ...
        ...     # Implement other required methods...
        >>>
        >>> upscaler_registry.register(NearestUpscaler)
    """

    name: str = "Base Upscaler Adapter"
    description: str = "Base class for upscaler adapters"
    requires_model: bool = False
    version: str = "0.1.0"

    def __init__(self, config: WallppConfig) -> None:
        """Initialize the upscaler adapter.

        Args:
            config: Configuration object containing upscaler settings
        """
        self.config = config
        logger.info(f"Initialized {self.name} upscaler")

    @abstractmethod
    def load_model(self) -> None:
        """Load the backing model into memory, if any.

        Raises
        ------
        ResampleError
            If the model cannot be loaded
        """
        pass

    def upscale(self, raster: Image.Image, factor: int) -> Image.Image:
        """Enlarge ``raster`` by ``factor`` in both dimensions.

        Args:
            raster: Source raster
            factor: 2 or 4

        Returns
        -------
        Image.Image
            Raster of size ``(width * factor, height * factor)``

        Raises
        ------
        ResampleError
            If the factor is unsupported or the backend fails
        """
        if factor not in SUPPORTED_FACTORS:
            raise ResampleError(f"Unsupported upscale factor {factor}, expected one of {SUPPORTED_FACTORS}")

        if not self.is_loaded:
            self.load_model()

        logger.debug(f"{self.name}: upscaling {raster.width}x{raster.height} by {factor}x")
        return self._upscale(raster, factor)

    @abstractmethod
    def _upscale(self, raster: Image.Image, factor: int) -> Image.Image:
        """Technique-specific upscale for an already validated factor."""
        pass

    @abstractmethod
    def unload_model(self) -> None:
        """Release the backing model, if any."""
        pass

    @property
    @abstractmethod
    def is_loaded(self) -> bool:
        """Check if the adapter is ready to upscale without loading."""
        pass

    def get_model_info(self) -> dict[str, Any]:
        """Get information about this upscaler adapter.

        Returns
        -------
        dict[str, Any]
            Dictionary containing adapter metadata
        """
        return {
            "name": self.name,
            "description": self.description,
            "requires_model": self.requires_model,
            "version": self.version,
            "is_loaded": self.is_loaded,
        }


class UpscalerRegistry:
    """Registry for managing available upscaler adapters.

    Usage
    -----
    Registering a new adapter:

        >>> upscaler_registry.register(MyUpscaler)

    Instantiating an adapter:

        >>> upscaler = upscaler_registry.instantiate("Lanczos", config)

    Notes
    -----
    - Adapters must be registered before they can be instantiated
    - Registering a name twice replaces the earlier class
    """

    def __init__(self) -> None:
        """Initialize the upscaler registry."""
        self._adapters: dict[str, type[UpscalerAdapterBase]] = {}

    def register(self, adapter_class: type[UpscalerAdapterBase]) -> None:
        """Register an upscaler adapter class.

        Args:
            adapter_class: Upscaler adapter class to register
        """
        adapter_name = adapter_class.name

        if adapter_name in self._adapters:
            logger.warning(f"Upscaler adapter '{adapter_name}' is already registered, overwriting")

        self._adapters[adapter_name] = adapter_class
        logger.debug(f"Registered upscaler adapter: {adapter_name}")

    def instantiate(self, adapter_name: str, config: WallppConfig) -> UpscalerAdapterBase:
        """Create an instance of a registered upscaler adapter.

        Args:
            adapter_name: Name of the adapter to instantiate
            config: Configuration object

        Returns
        -------
        UpscalerAdapterBase
            New instance of the specified adapter

        Raises
        ------
        KeyError
            If adapter_name is not registered
        """
        if adapter_name not in self._adapters:
            available = ", ".join(self.list_available())
            raise KeyError(
                f"Upscaler adapter '{adapter_name}' not found. " f"Available adapters: {available}"
            )

        instance = self._adapters[adapter_name](config=config)
        logger.info(f"Instantiated upscaler adapter: {adapter_name}")
        return instance

    def list_available(self) -> list[str]:
        """List all registered adapter names."""
        return list(self._adapters.keys())

    def get_adapter_info(self, adapter_name: str) -> dict[str, Any] | None:
        """Get information about a registered adapter.

        Args:
            adapter_name: Name of the adapter

        Returns
        -------
        dict[str, Any] | None
            Adapter metadata or None if not found
        """
        if adapter_name not in self._adapters:
            return None

        adapter_class = self._adapters[adapter_name]
        return {
            "name": adapter_class.name,
            "description": adapter_class.description,
            "requires_model": adapter_class.requires_model,
            "version": adapter_class.version,
        }


# Global upscaler registry instance
upscaler_registry = UpscalerRegistry()
