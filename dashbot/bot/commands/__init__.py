"""Command modules. Each module exposes one ``command`` descriptor."""
