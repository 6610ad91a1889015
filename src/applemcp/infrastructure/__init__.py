"""Infrastructure layer — automation bridge, Messages database, collection sources."""
