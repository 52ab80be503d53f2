"""Infrastructure layer - HTTP, upstream search and language model adapters."""
