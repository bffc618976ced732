"""Domain models: identifiers, envelopes, endpoint descriptors and errors."""
