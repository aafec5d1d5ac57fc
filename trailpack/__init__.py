"""TrailPack packing-list core: lists, items and the shared gear catalog."""
