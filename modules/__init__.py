"""Feature modules: isochrone synthesis and marker overlap analysis."""
