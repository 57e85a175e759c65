"""Report parsers for results produced outside pytest."""
