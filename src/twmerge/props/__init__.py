"""CSS property metadata."""

from twmerge.props.registry import Property, PropertyRegistry, Status, load_properties

__all__ = ["Property", "PropertyRegistry", "Status", "load_properties"]
