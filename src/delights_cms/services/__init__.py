"""Service layer: composition root and seeding routines."""

from .container import ContentServices, build_services
from .seeding import SeedReport, seed_all

__all__ = ["ContentServices", "SeedReport", "build_services", "seed_all"]
