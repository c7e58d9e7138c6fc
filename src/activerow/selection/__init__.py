"""Selection criterion resolution."""

from activerow.selection.resolver import SelectionResolver, classify, strip_where

__all__ = ["SelectionResolver", "classify", "strip_where"]
