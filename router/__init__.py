from .isochrones import router as isochrones_router
from .misc import router as misc_router
from .overlap import router as overlap_router

__all__ = ["isochrones_router", "misc_router", "overlap_router"]
