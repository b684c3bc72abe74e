"""Sample data generators."""

from estate_ledger.generators.sample import SampleDataGenerator

__all__ = ["SampleDataGenerator"]
