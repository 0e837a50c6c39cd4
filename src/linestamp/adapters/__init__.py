"""Host adapters for stamped buffers."""
