"""
Kernel Errors
Exceptions raised by the CRS registry, the geometry decoder and the catalogue loader
"""


class MapKernelError(Exception):
    """Base class for all mapkernel errors"""
    pass


class UnknownProjection(MapKernelError, KeyError):
    """Raised when a CRS code is not registered"""

    def __init__(self, code):
        self.code = code
        super().__init__(f"Unknown projection: {code!r}")

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return self.args[0]


class MalformedGeometryEncoding(MapKernelError, ValueError):
    """Raised when a tiled geometry's ends/endss do not fit its coordinate buffer"""
    pass


class RegistryFrozen(MapKernelError, RuntimeError):
    """Raised when definitions are registered after the registry has served lookups"""
    pass


class CatalogueError(MapKernelError, ValueError):
    """Raised when a CRS catalogue entry cannot be validated or parsed by the transform engine"""
    pass
