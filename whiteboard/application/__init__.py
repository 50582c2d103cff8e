"""Application layer: services orchestrating cache, queue and transport."""
