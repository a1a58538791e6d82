"""Template registry for monitored-resource types: schemas, parameters and custom overlays."""

__version__ = "0.1.0"
