"""
Process-level services for hosts embedding the kernel
"""
from .logging_service import RingBufferHandler, get_ring_handler, init_logging

__all__ = ["RingBufferHandler", "get_ring_handler", "init_logging"]
