"""Chat platform clients."""
