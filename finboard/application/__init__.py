"""Application layer: DTOs, ports, and services (dashboard aggregation, mutations)."""
