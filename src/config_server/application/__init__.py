"""Application layer: ports the resolver depends on."""
