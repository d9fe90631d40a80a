class InvalidSymbolValue(ValueError):
    """A card or die was built from a value outside its domain."""
