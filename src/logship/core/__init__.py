"""Pure domain: metadata, normalization, events, encoding and ports."""
