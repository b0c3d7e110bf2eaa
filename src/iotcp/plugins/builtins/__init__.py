"""Built-in asset-class plugins."""
